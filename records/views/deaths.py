from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Death
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.death import DeathSerializer
from records.services import deaths as svc
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def deaths_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_deaths(svc.visible_deaths(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_death(d) for d in items], 'pagination': pagination})
    s = DeathSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    death = svc.create_death(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_death(death)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def death_detail(request, pk: int):
    user = request.user
    death = get_scoped_or_404(user, Death.objects.select_related('facility'), pk, label='death record')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_death(death)})
    if request.method == 'DELETE':
        svc.delete_death(user, death, request=request)
        return Response({'ok': True})
    s = DeathSerializer(death, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    death = svc.update_death(user, death, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_death(death)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def death_summary(request):
    return Response({'ok': True, 'data': svc.death_summary(request.user)})
