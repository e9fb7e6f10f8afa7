"""
Django admin registrations for the registry models.

Superusers can inspect and correct records through ``/admin/``.  List
displays favour the registration number and the facility, which is how
records staff look things up.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    AntenatalRecord,
    AntenatalVisit,
    AuditEvent,
    Birth,
    CaseContact,
    Death,
    Disease,
    DiseaseCase,
    Facility,
    FamilyPlanningClient,
    Immunization,
    Outbreak,
    Patient,
    PatientDocument,
    PatientMedicalHistory,
    PatientVisit,
    User,
)


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'facility_type', 'lga', 'status')
    list_filter = ('facility_type', 'status', 'lga')
    search_fields = ('name', 'lga', 'contact_person')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'role', 'facility', 'status', 'is_active', 'is_staff')
    list_filter = ('role', 'status', 'facility', 'is_active')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Health records', {'fields': ('role', 'facility', 'phone', 'status', 'rejection_reason')}),
    )


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'first_name', 'last_name', 'gender', 'lga', 'facility', 'status')
    list_filter = ('gender', 'status', 'facility')
    search_fields = ('registration_number', 'first_name', 'last_name', 'phone_number')


@admin.register(PatientVisit)
class PatientVisitAdmin(admin.ModelAdmin):
    list_display = ('patient', 'visit_date', 'purpose', 'created_by')
    search_fields = ('patient__registration_number', 'purpose', 'diagnosis')


@admin.register(PatientMedicalHistory)
class PatientMedicalHistoryAdmin(admin.ModelAdmin):
    list_display = ('patient', 'condition', 'diagnosis_date', 'status', 'severity')
    list_filter = ('status', 'severity')
    search_fields = ('patient__registration_number', 'condition')


@admin.register(PatientDocument)
class PatientDocumentAdmin(admin.ModelAdmin):
    list_display = ('patient', 'title', 'document_type', 'document_date', 'confidential', 'uploaded_at')
    list_filter = ('document_type', 'confidential')
    search_fields = ('patient__registration_number', 'title', 'file_name')
    readonly_fields = ('file_name', 'content_type', 'size', 'uploaded_at')


@admin.register(Birth)
class BirthAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'child_name', 'gender', 'date_of_birth', 'facility', 'status')
    list_filter = ('gender', 'delivery_method', 'status')
    search_fields = ('registration_number', 'child_name', 'mother_name')


@admin.register(Death)
class DeathAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'deceased_name', 'date_of_death', 'cause_of_death', 'status')
    list_filter = ('manner_of_death', 'place_of_death', 'status')
    search_fields = ('registration_number', 'deceased_name', 'cause_of_death')


class AntenatalVisitInline(admin.TabularInline):
    model = AntenatalVisit
    extra = 0


@admin.register(AntenatalRecord)
class AntenatalRecordAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'patient', 'lmp', 'edd', 'risk_level', 'status', 'next_appointment')
    list_filter = ('risk_level', 'status', 'facility')
    search_fields = ('registration_number', 'patient__first_name', 'patient__last_name')
    inlines = [AntenatalVisitInline]


@admin.register(Immunization)
class ImmunizationAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'patient', 'vaccine_type', 'dose_number', 'vaccination_date', 'status')
    list_filter = ('vaccine_type', 'status', 'facility')
    search_fields = ('registration_number', 'patient__registration_number', 'lot_number')


@admin.register(Disease)
class DiseaseAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'disease_type')


class CaseContactInline(admin.TabularInline):
    model = CaseContact
    extra = 0


@admin.register(DiseaseCase)
class DiseaseCaseAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'disease', 'patient', 'report_date', 'status', 'outcome', 'is_outbreak')
    list_filter = ('disease', 'status', 'severity', 'outcome', 'is_outbreak')
    search_fields = ('registration_number', 'patient__first_name', 'patient__last_name', 'location')
    inlines = [CaseContactInline]


@admin.register(Outbreak)
class OutbreakAdmin(admin.ModelAdmin):
    list_display = ('id', 'disease', 'lga', 'start_date', 'case_count', 'status')
    list_filter = ('disease', 'status')


@admin.register(FamilyPlanningClient)
class FamilyPlanningClientAdmin(admin.ModelAdmin):
    list_display = ('registration_number', 'patient', 'client_type', 'current_method', 'status')
    list_filter = ('client_type', 'status', 'current_method')
    search_fields = ('registration_number', 'patient__first_name', 'patient__last_name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'action', 'object_type', 'object_id', 'ip')
    list_filter = ('action', 'object_type')
    search_fields = ('user__username', 'action')
    readonly_fields = ('created_at',)
