"""
Facility registry views.

Every role can read the facilities it is allowed to see; creating,
editing and removing facilities is reserved to administrators and
supervisors.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsClinicalRole
from records.serializers.facility import FacilitySerializer
from records.services import facilities as svc
from records.services.access import is_oversight
from records.services.pagination import paginate


def _require_oversight(user):
    if not is_oversight(user):
        raise PermissionDenied('only administrators and supervisors manage facilities')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def facilities_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_facilities(svc.visible_facilities(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_facility(f) for f in items], 'pagination': pagination})
    _require_oversight(user)
    s = FacilitySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    facility = svc.create_facility(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_facility(facility, detail=True)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def facility_detail(request, pk: int):
    user = request.user
    facility = svc.visible_facilities(user).filter(pk=pk).first()
    if facility is None:
        raise NotFound('facility not found')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_facility(facility, detail=True)})
    _require_oversight(user)
    if request.method == 'DELETE':
        svc.delete_facility(user, facility, request=request)
        return Response({'ok': True})
    s = FacilitySerializer(facility, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    facility = svc.update_facility(user, facility, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_facility(facility, detail=True)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def facility_search(request):
    term = (request.query_params.get('q') or '').strip()
    results = svc.search_facilities(request.user, term)
    return Response({'ok': True, 'data': [svc.serialize_facility(f) for f in results]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def facility_statistics(request):
    return Response({'ok': True, 'data': svc.facility_statistics(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def facility_map(request):
    return Response({'ok': True, 'data': svc.facility_map(request.user)})
