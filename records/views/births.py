from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Birth
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.birth import BirthSerializer
from records.services import births as svc
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def births_list(request):
    """List births with summary counts over the filtered set, or register one."""
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_births(svc.visible_births(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({
            'ok': True,
            'data': {
                'births': [svc.serialize_birth(b) for b in items],
                'total': pagination['totalItems'],
                'counts': svc.birth_counts(qs),
            },
            'pagination': pagination,
        })
    s = BirthSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    birth = svc.create_birth(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_birth(birth)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def birth_detail(request, pk: int):
    user = request.user
    birth = get_scoped_or_404(user, Birth.objects.select_related('facility'), pk, label='birth')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_birth(birth)})
    if request.method == 'DELETE':
        svc.delete_birth(user, birth, request=request)
        return Response({'ok': True})
    s = BirthSerializer(birth, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    birth = svc.update_birth(user, birth, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_birth(birth)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def birth_statistics(request):
    return Response({'ok': True, 'data': svc.birth_statistics(request.user)})
