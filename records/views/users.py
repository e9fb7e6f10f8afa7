"""
User administration (administrators only) and audit log views.

Self-registered accounts show up here as ``pending`` until an
administrator approves or rejects them.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import AuditEvent, User
from records.permissions import IsAdminRole, IsSupervisorOrAdmin
from records.serializers.user import AuditLogQuerySerializer, RejectSerializer, RoleSerializer, UserSerializer
from records.services import users as svc
from records.services.audit import serialize_event
from records.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users_list(request):
    if request.method == 'GET':
        qs = svc.filter_users(User.objects.all(), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_user(u) for u in items], 'pagination': pagination})
    s = UserSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = svc.create_user(request.user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_user(user)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk: int):
    user = svc.get_user_or_404(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_user(user)})
    if request.method == 'DELETE':
        svc.delete_user(request.user, user, request=request)
        return Response({'ok': True})
    s = UserSerializer(user, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    user = svc.update_user(request.user, user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_user(user)})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_approve(request, pk: int):
    user = svc.approve_user(request.user, svc.get_user_or_404(pk), request=request)
    return Response({'ok': True, 'data': svc.serialize_user(user)})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_reject(request, pk: int):
    user = svc.get_user_or_404(pk)
    s = RejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = svc.reject_user(request.user, user, s.validated_data.get('reason', ''), request=request)
    return Response({'ok': True, 'data': svc.serialize_user(user)})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_role(request, pk: int):
    user = svc.get_user_or_404(pk)
    s = RoleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = svc.change_role(request.user, user, s.validated_data['role'], request=request)
    return Response({'ok': True, 'data': svc.serialize_user(user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_logs(request, pk: int):
    user = svc.get_user_or_404(pk)
    qs = AuditEvent.objects.filter(user=user).select_related('user').order_by('-created_at', '-id')
    items, pagination = paginate(qs, request.query_params)
    return Response({'ok': True, 'data': [serialize_event(e) for e in items], 'pagination': pagination})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupervisorOrAdmin])
def audit_logs(request):
    q = AuditLogQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = AuditEvent.objects.select_related('user')
    if vd.get('action'):
        qs = qs.filter(action=vd['action'])
    if vd.get('objectType'):
        qs = qs.filter(object_type=vd['objectType'])
    if vd.get('userId'):
        qs = qs.filter(user_id=vd['userId'])
    if vd.get('dateFrom'):
        qs = qs.filter(created_at__date__gte=vd['dateFrom'])
    if vd.get('dateTo'):
        qs = qs.filter(created_at__date__lte=vd['dateTo'])
    items, pagination = paginate(qs.order_by('-created_at', '-id'), request.query_params)
    return Response({'ok': True, 'data': [serialize_event(e) for e in items], 'pagination': pagination})
