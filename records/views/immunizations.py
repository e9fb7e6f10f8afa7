"""
Immunization views.

Besides the usual registry endpoints this module exposes the vaccine
schedule calculator, coverage figures, a patient's vaccination card,
bulk import and CSV export.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Immunization, Patient
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.immunization import ImmunizationSerializer, ScheduleInfoQuerySerializer
from records.services import immunizations as svc
from records.services import vaccines
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate
from records.services.reports import export_csv
from records.throttles import BulkImportRateThrottle


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunizations_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_immunizations(svc.visible_immunizations(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_immunization(i) for i in items], 'pagination': pagination})
    s = ImmunizationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    imm = svc.create_immunization(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_immunization(imm)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def immunization_detail(request, pk: int):
    user = request.user
    imm = get_scoped_or_404(user, Immunization.objects.select_related('patient', 'facility'), pk,
                            label='immunization')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_immunization(imm)})
    if request.method == 'DELETE':
        svc.delete_immunization(user, imm, request=request)
        return Response({'ok': True})
    s = ImmunizationSerializer(imm, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    imm = svc.update_immunization(user, imm, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_immunization(imm)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_statistics(request):
    return Response({'ok': True, 'data': svc.immunization_statistics(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_schedules(request):
    return Response({'ok': True, 'data': vaccines.schedule_catalogue()})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_schedule_info(request):
    q = ScheduleInfoQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    info = vaccines.get_vaccine_schedule_info(vd['vaccineType'], vd['doseNumber'])
    data = {'vaccineType': vd['vaccineType'], 'doseNumber': vd['doseNumber'], **info}
    if vd.get('vaccinationDate'):
        due = vaccines.next_due_date(vd['vaccineType'], vd['doseNumber'], vd['vaccinationDate'])
        data['nextDueDate'] = due.isoformat() if due else None
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_coverage(request):
    return Response({'ok': True, 'data': svc.coverage(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_patient_history(request, patient_id: int):
    patient = get_scoped_or_404(request.user, Patient.objects.all(), patient_id, label='patient')
    return Response({'ok': True, 'data': svc.patient_history(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def vaccine_types(request):
    return Response({'ok': True, 'data': vaccines.vaccine_types()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
@throttle_classes([BulkImportRateThrottle])
def immunization_bulk_import(request):
    rows = request.data.get('records') if isinstance(request.data, dict) else request.data
    result = svc.bulk_import(request.user, rows, request=request)
    return Response({'ok': True, 'data': result}, status=status.HTTP_201_CREATED if result['created'] else status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def immunization_export(request):
    return export_csv(request.user, 'immunizations', request.query_params)
