"""
Antenatal care views: booked pregnancies, their visits, the planned
visit schedule and the programme statistics.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import AntenatalRecord
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.antenatal import AntenatalRecordSerializer, AntenatalVisitSerializer, ScheduleQuerySerializer
from records.services import antenatal as svc
from records.services.access import get_scoped_or_404
from records.services.pagination import paginate

DEFAULT_SCHEDULE_VISITS = 8


def _record(user, pk):
    return get_scoped_or_404(user, AntenatalRecord.objects.select_related('patient', 'facility'), pk,
                             label='antenatal record')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def antenatal_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_records(svc.visible_records(user), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_record(r) for r in items], 'pagination': pagination})
    s = AntenatalRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = svc.create_record(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_record(record)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def antenatal_detail(request, pk: int):
    user = request.user
    record = _record(user, pk)
    if request.method == 'GET':
        data = svc.serialize_record(record)
        data['visits'] = [svc.serialize_visit(v) for v in record.visits.order_by('visit_number')]
        return Response({'ok': True, 'data': data})
    if request.method == 'DELETE':
        svc.delete_record(user, record, request=request)
        return Response({'ok': True})
    s = AntenatalRecordSerializer(record, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    record = svc.update_record(user, record, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_record(record)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def antenatal_visits(request, pk: int):
    user = request.user
    record = _record(user, pk)
    if request.method == 'GET':
        visits = record.visits.order_by('visit_number')
        return Response({'ok': True, 'data': [svc.serialize_visit(v) for v in visits]})
    s = AntenatalVisitSerializer(data=request.data, context={'record': record})
    s.is_valid(raise_exception=True)
    visit = svc.create_visit(user, record, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_visit(visit)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def antenatal_schedule(request, pk: int):
    record = _record(request.user, pk)
    q = ScheduleQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    count = q.validated_data.get('count') or DEFAULT_SCHEDULE_VISITS
    return Response({'ok': True, 'data': {
        'recordId': record.id,
        'lmp': record.lmp.isoformat(),
        'edd': record.edd.isoformat() if record.edd else None,
        'visits': svc.record_schedule(record, count),
    }})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def antenatal_statistics(request):
    return Response({'ok': True, 'data': svc.antenatal_statistics(request.user)})
