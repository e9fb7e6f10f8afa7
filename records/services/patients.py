import logging
import os

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound, ValidationError

from records.models import Patient, PatientDocument, PatientMedicalHistory, PatientVisit
from .access import is_oversight, resolve_facility_for_write
from .audit import log_action
from .dates import age_in_years
from .stats_cache import invalidate

logger = logging.getLogger(__name__)


def serialize_patient(p: Patient, *, detail: bool = False) -> dict:
    data = {
        'id': p.id,
        'registrationNumber': p.registration_number,
        'firstName': p.first_name,
        'lastName': p.last_name,
        'otherNames': p.other_names,
        'fullName': p.full_name,
        'gender': p.gender,
        'dateOfBirth': p.date_of_birth.isoformat() if p.date_of_birth else None,
        'age': age_in_years(p.date_of_birth),
        'phoneNumber': p.phone_number,
        'email': p.email,
        'address': p.address,
        'city': p.city,
        'state': p.state,
        'lga': p.lga,
        'location': p.location,
        'bloodGroup': p.blood_group,
        'genotype': p.genotype,
        'maritalStatus': p.marital_status,
        'nextOfKinName': p.next_of_kin_name,
        'nextOfKinRelationship': p.next_of_kin_relationship,
        'nextOfKinPhone': p.next_of_kin_phone,
        'notes': p.notes,
        'status': p.status,
        'registrationDate': p.registration_date.isoformat() if p.registration_date else None,
        'facilityId': p.facility_id,
        'facilityName': p.facility.name if p.facility_id else None,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
        'updatedAt': p.updated_at.isoformat() if p.updated_at else None,
    }
    if detail:
        last = p.visits.order_by('-visit_date', '-id').first()
        data['visitCount'] = p.visits.count()
        data['lastVisit'] = serialize_visit(last) if last else None
        data['medicalHistoryCount'] = p.medical_history.count()
        data['documentCount'] = p.documents.count()
    return data


def serialize_visit(v: PatientVisit) -> dict:
    return {
        'id': v.id,
        'patientId': v.patient_id,
        'visitDate': v.visit_date.isoformat(),
        'purpose': v.purpose,
        'diagnosis': v.diagnosis,
        'treatment': v.treatment,
        'notes': v.notes,
        'vitalSigns': v.vital_signs,
        'createdBy': v.created_by_id,
        'createdAt': v.created_at.isoformat() if v.created_at else None,
    }


def patient_search_q(term: str, prefix: str = '') -> Q:
    q = Q()
    for field in ('first_name', 'last_name', 'other_names', 'registration_number', 'phone_number'):
        q |= Q(**{f'{prefix}{field}__icontains': term})
    return q


def filter_patients(qs, params):
    status = params.get('status')
    gender = params.get('gender')
    facility_id = params.get('facilityId')
    lga = params.get('lga')
    search = (params.get('search') or '').strip()
    if status:
        qs = qs.filter(status=status)
    if gender:
        qs = qs.filter(gender__iexact=gender)
    if facility_id:
        qs = qs.filter(facility_id=facility_id)
    if lga:
        qs = qs.filter(lga__iexact=lga)
    if search:
        qs = qs.filter(patient_search_q(search))
    return qs.select_related('facility').order_by('-id')


def resolve_patient(user, patient_id, field='patientId') -> Patient:
    """Patient a new clinical record is attached to; must be visible to the user."""
    patient = Patient.objects.select_related('facility').filter(pk=patient_id).first()
    if patient is None or not (is_oversight(user) or patient.facility_id == getattr(user, 'facility_id', None)):
        raise ValidationError({field: ['patient not found']})
    return patient


def create_patient(user, data: dict, request=None) -> Patient:
    facility = resolve_facility_for_write(user, data.pop('facilityId', None))
    data.setdefault('state', settings.DEFAULT_STATE)
    with transaction.atomic():
        patient = Patient.objects.create(facility=facility, **data)
        log_action(user=user, action='patient_create', object_type='patient', object_id=patient.id,
                   detail={'registrationNumber': patient.registration_number}, request=request)
    invalidate('patients', [patient.facility_id])
    logger.info("Patient %s registered by %s", patient.registration_number, user.username)
    return patient


def update_patient(user, patient: Patient, data: dict, request=None) -> Patient:
    old_facility = patient.facility_id
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        # only oversight roles move patients between facilities
        if is_oversight(user):
            patient.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(patient, field, value)
    patient.save()
    log_action(user=user, action='patient_update', object_type='patient', object_id=patient.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('patients', [old_facility, patient.facility_id])
    return patient


def delete_patient(user, patient: Patient, request=None) -> None:
    pid, facility_id, number = patient.id, patient.facility_id, patient.registration_number
    # stored files are not removed by the cascade
    for document in patient.documents.all():
        document.file.delete(save=False)
    patient.delete()
    log_action(user=user, action='patient_delete', object_type='patient', object_id=pid,
               detail={'registrationNumber': number}, request=request)
    # cascades remove the patient's clinical records too
    for module in ('patients', 'antenatal', 'immunizations', 'diseases', 'family-planning'):
        invalidate(module, [facility_id])
    logger.info("Patient %s deleted by %s", number, user.username)


def create_visit(user, patient: Patient, data: dict, request=None) -> PatientVisit:
    visit = PatientVisit.objects.create(patient=patient, created_by=user, **data)
    log_action(user=user, action='patient_visit_create', object_type='patient', object_id=patient.id,
               detail={'visitId': visit.id}, request=request)
    return visit


def serialize_history(h: PatientMedicalHistory) -> dict:
    return {
        'id': h.id,
        'patientId': h.patient_id,
        'condition': h.condition,
        'diagnosisDate': h.diagnosis_date.isoformat() if h.diagnosis_date else None,
        'status': h.status,
        'severity': h.severity,
        'diagnosedBy': h.diagnosed_by,
        'treatmentHistory': h.treatment_history,
        'notes': h.notes,
        'createdBy': h.created_by_id,
        'createdAt': h.created_at.isoformat() if h.created_at else None,
        'updatedAt': h.updated_at.isoformat() if h.updated_at else None,
    }


def get_history_or_404(patient: Patient, entry_id) -> PatientMedicalHistory:
    entry = patient.medical_history.filter(pk=entry_id).first()
    if entry is None:
        raise NotFound('medical history entry not found')
    return entry


def create_history(user, patient: Patient, data: dict, request=None) -> PatientMedicalHistory:
    entry = PatientMedicalHistory.objects.create(patient=patient, created_by=user, **data)
    log_action(user=user, action='medical_history_create', object_type='patient', object_id=patient.id,
               detail={'historyId': entry.id, 'condition': entry.condition}, request=request)
    return entry


def update_history(user, entry: PatientMedicalHistory, data: dict, request=None) -> PatientMedicalHistory:
    for field, value in data.items():
        setattr(entry, field, value)
    entry.save()
    log_action(user=user, action='medical_history_update', object_type='patient', object_id=entry.patient_id,
               detail={'historyId': entry.id, 'fields': sorted(data)}, request=request)
    return entry


def delete_history(user, entry: PatientMedicalHistory, request=None) -> None:
    patient_id, entry_id = entry.patient_id, entry.id
    entry.delete()
    log_action(user=user, action='medical_history_delete', object_type='patient', object_id=patient_id,
               detail={'historyId': entry_id}, request=request)


def serialize_document(d: PatientDocument) -> dict:
    return {
        'id': d.id,
        'patientId': d.patient_id,
        'documentType': d.document_type,
        'documentDate': d.document_date.isoformat() if d.document_date else None,
        'title': d.title,
        'description': d.description,
        'source': d.source,
        'confidential': d.confidential,
        'fileName': d.file_name,
        'contentType': d.content_type,
        'size': d.size,
        'downloadUrl': f'/api/patients/{d.patient_id}/documents/{d.id}/download',
        'uploadedBy': d.uploaded_by_id,
        'uploadedAt': d.uploaded_at.isoformat() if d.uploaded_at else None,
    }


def get_document_or_404(patient: Patient, document_id) -> PatientDocument:
    document = patient.documents.filter(pk=document_id).first()
    if document is None:
        raise NotFound('document not found')
    return document


def create_document(user, patient: Patient, data: dict, request=None) -> PatientDocument:
    upload = data['file']
    document = PatientDocument.objects.create(
        patient=patient, uploaded_by=user,
        file_name=os.path.basename(upload.name)[:255],
        content_type=(getattr(upload, 'content_type', '') or '')[:100],
        size=upload.size,
        **data,
    )
    log_action(user=user, action='document_upload', object_type='patient', object_id=patient.id,
               detail={'documentId': document.id, 'title': document.title}, request=request)
    logger.info("Document %s (%s bytes) uploaded for patient %s by %s",
                document.file_name, document.size, patient.registration_number, user.username)
    return document


def delete_document(user, document: PatientDocument, request=None) -> None:
    patient_id, document_id, title = document.patient_id, document.id, document.title
    document.file.delete(save=False)
    document.delete()
    log_action(user=user, action='document_delete', object_type='patient', object_id=patient_id,
               detail={'documentId': document_id, 'title': title}, request=request)
    logger.info("Document %s of patient %s deleted by %s", document_id, patient_id, user.username)
