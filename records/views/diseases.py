"""
Disease surveillance views: case registry, contact tracing and outbreak
reporting.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Disease, DiseaseCase
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.disease import CaseContactSerializer, DiseaseCaseSerializer, OutbreakSerializer
from records.services import diseases as svc
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate


def _case(user, pk):
    return get_scoped_or_404(user, DiseaseCase.objects.select_related('disease', 'patient', 'facility'), pk,
                             label='disease case')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def cases_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_cases(svc.visible_cases(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_case(c) for c in items], 'pagination': pagination})
    s = DiseaseCaseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    case = svc.create_case(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_case(case, detail=True)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def case_detail(request, pk: int):
    user = request.user
    case = _case(user, pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_case(case, detail=True)})
    if request.method == 'DELETE':
        svc.delete_case(user, case, request=request)
        return Response({'ok': True})
    s = DiseaseCaseSerializer(case, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    case = svc.update_case(user, case, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_case(case, detail=True)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def case_contacts(request, pk: int):
    user = request.user
    case = _case(user, pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': [svc.serialize_contact(c) for c in case.contacts.order_by('id')]})
    s = CaseContactSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    contact = svc.add_contact(user, case, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_contact(contact)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def diseases_catalogue(request):
    return Response({'ok': True, 'data': [svc.serialize_disease(d) for d in Disease.objects.order_by('name')]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def disease_statistics(request):
    return Response({'ok': True, 'data': svc.disease_statistics(request.user)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def outbreaks(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.visible_outbreaks(user, request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_outbreak(o) for o in items], 'pagination': pagination})
    s = OutbreakSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    outbreak = svc.report_outbreak(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_outbreak(outbreak)}, status=status.HTTP_201_CREATED)
