"""
Patient registry views.

Doctors and records staff register and maintain the patients of their
own facility; administrators and supervisors work across facilities.
Only administrators and supervisors may delete a patient, or one of the
medical history entries and documents filed under it.
"""
from __future__ import annotations

import os

from django.db.models import F
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Patient
from records.permissions import CanDeleteRecords, IsClinicalRole
from records.serializers.patient import (MedicalHistorySerializer, PatientDocumentSerializer, PatientSerializer,
                                         PatientVisitSerializer, SearchQuerySerializer)
from records.services import patients as svc
from records.services.access import get_scoped_or_404, scope_queryset
from records.services.pagination import paginate


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patients_list(request):
    user = request.user
    if request.method == 'GET':
        qs = svc.filter_patients(scope_queryset(user, Patient.objects.all()), request.query_params)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_patient(p) for p in items], 'pagination': pagination})
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.create_patient(user, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_patient(patient, detail=True)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def patient_detail(request, pk: int):
    user = request.user
    patient = get_scoped_or_404(user, Patient.objects.select_related('facility'), pk, label='patient')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_patient(patient, detail=True)})
    if request.method == 'DELETE':
        svc.delete_patient(user, patient, request=request)
        return Response({'ok': True})
    # PUT accepts partial payloads; the dashboard sends only the edited fields
    s = PatientSerializer(patient, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    patient = svc.update_patient(user, patient, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_patient(patient, detail=True)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_search(request):
    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    term = (q.validated_data.get('q') or '').strip()
    limit = q.validated_data.get('limit') or 20
    qs = scope_queryset(request.user, Patient.objects.select_related('facility'))
    if term:
        qs = qs.filter(svc.patient_search_q(term))
    results = qs.order_by('last_name', 'first_name', 'id')[:limit]
    return Response({'ok': True, 'data': [svc.serialize_patient(p) for p in results]})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_visits(request, pk: int):
    user = request.user
    patient = get_scoped_or_404(user, Patient.objects.all(), pk, label='patient')
    if request.method == 'GET':
        qs = patient.visits.order_by('-visit_date', '-id')
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_visit(v) for v in items], 'pagination': pagination})
    s = PatientVisitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    visit = svc.create_visit(user, patient, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_visit(visit)}, status=status.HTTP_201_CREATED)


def _patient(request, pk):
    return get_scoped_or_404(request.user, Patient.objects.all(), pk, label='patient')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_medical_history(request, pk: int):
    patient = _patient(request, pk)
    if request.method == 'GET':
        qs = patient.medical_history.order_by(F('diagnosis_date').desc(nulls_last=True), '-id')
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_history(h) for h in items], 'pagination': pagination})
    s = MedicalHistorySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = svc.create_history(request.user, patient, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_history(entry)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def patient_medical_history_detail(request, pk: int, entry_id: int):
    entry = svc.get_history_or_404(_patient(request, pk), entry_id)
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_history(entry)})
    if request.method == 'DELETE':
        svc.delete_history(request.user, entry, request=request)
        return Response({'ok': True})
    s = MedicalHistorySerializer(entry, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    entry = svc.update_history(request.user, entry, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_history(entry)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_documents(request, pk: int):
    patient = _patient(request, pk)
    if request.method == 'GET':
        qs = patient.documents.order_by('-uploaded_at', '-id')
        document_type = request.query_params.get('documentType')
        if document_type:
            qs = qs.filter(document_type=document_type)
        items, pagination = paginate(qs, request.query_params)
        return Response({'ok': True, 'data': [svc.serialize_document(d) for d in items], 'pagination': pagination})
    s = PatientDocumentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    document = svc.create_document(request.user, patient, dict(s.validated_data), request=request)
    return Response({'ok': True, 'data': svc.serialize_document(document)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, CanDeleteRecords])
def patient_document_detail(request, pk: int, document_id: int):
    document = svc.get_document_or_404(_patient(request, pk), document_id)
    if request.method == 'DELETE':
        svc.delete_document(request.user, document, request=request)
        return Response({'ok': True})
    return Response({'ok': True, 'data': svc.serialize_document(document)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_document_download(request, pk: int, document_id: int):
    document = svc.get_document_or_404(_patient(request, pk), document_id)
    return FileResponse(document.file.open('rb'), as_attachment=True,
                        filename=document.file_name or os.path.basename(document.file.name),
                        content_type=document.content_type or None)
