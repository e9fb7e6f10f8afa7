from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import FamilyPlanningClient
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.family_planning import FamilyPlanningClientSerializer
from records.serializers.patient import SearchQuerySerializer
from records.services import family_planning as svc
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def clients_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_clients(svc.visible_clients(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_client(c) for c in items], 'pagination': pagination})
    s = FamilyPlanningClientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    client = svc.create_client(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_client(client)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def client_detail(request, pk: int):
    user = request.user
    client = get_scoped_or_404(user, FamilyPlanningClient.objects.select_related('patient', 'facility'), pk,
                               label='client')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_client(client)})
    if request.method == 'DELETE':
        svc.delete_client(user, client, request=request)
        return Response({'ok': True})
    s = FamilyPlanningClientSerializer(client, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    client = svc.update_client(user, client, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_client(client)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def client_search(request):
    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    term = (q.validated_data.get('q') or '').strip()
    results = svc.search_clients(request.user, term, q.validated_data.get('limit') or 20)
    return Response({'ok': True, 'data': [svc.serialize_client(c) for c in results]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def methods(request):
    return Response({'ok': True, 'data': svc.METHODS})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def family_planning_statistics(request):
    return Response({'ok': True, 'data': svc.family_planning_statistics(request.user)})
