"""
URL mappings for the health records API.

Paths carry no trailing slash because the dashboard calls them that
way.  Fixed sub-paths such as ``search`` or ``statistics`` are listed
before the ``<int:pk>`` routes of the same resource.
"""
from django.urls import include, path

from .auth_views import (change_password, jwt_logout_view, jwt_refresh_view, login_view, me_view, profile_view,
                         register_view)
from .views import (antenatal, births, deaths, diseases, facilities, family_planning, health, immunizations,
                    locations, patients, reports, users)

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    # Authentication
    path('api/auth/login', login_view),
    path('api/auth/register', register_view),
    path('api/auth/me', me_view),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', jwt_logout_view),
    path('api/auth/profile', profile_view),
    path('api/auth/change-password', change_password),

    # Facilities
    path('api/facilities', facilities.facilities_list),
    path('api/facilities/search', facilities.facility_search),
    path('api/facilities/statistics', facilities.facility_statistics),
    path('api/facilities/map', facilities.facility_map),
    path('api/facilities/<int:pk>', facilities.facility_detail),

    # Patients
    path('api/patients', patients.patients_list),
    path('api/patients/search', patients.patient_search),
    path('api/patients/<int:pk>', patients.patient_detail),
    path('api/patients/<int:pk>/visits', patients.patient_visits),
    path('api/patients/<int:pk>/medical-history', patients.patient_medical_history),
    path('api/patients/<int:pk>/medical-history/<int:entry_id>', patients.patient_medical_history_detail),
    path('api/patients/<int:pk>/documents', patients.patient_documents),
    path('api/patients/<int:pk>/documents/<int:document_id>', patients.patient_document_detail),
    path('api/patients/<int:pk>/documents/<int:document_id>/download', patients.patient_document_download),

    # Births
    path('api/births', births.births_list),
    path('api/births/statistics', births.birth_statistics),
    path('api/births/<int:pk>', births.birth_detail),

    # Deaths
    path('api/death-statistics', deaths.deaths_list),
    path('api/death-statistics/summary', deaths.death_summary),
    path('api/death-statistics/<int:pk>', deaths.death_detail),

    # Antenatal care
    path('api/antenatal', antenatal.antenatal_list),
    path('api/antenatal/statistics', antenatal.antenatal_statistics),
    path('api/antenatal/<int:pk>', antenatal.antenatal_detail),
    path('api/antenatal/<int:pk>/visits', antenatal.antenatal_visits),
    path('api/antenatal/<int:pk>/schedule', antenatal.antenatal_schedule),

    # Immunizations
    path('api/immunizations', immunizations.immunizations_list),
    path('api/immunizations/statistics', immunizations.immunization_statistics),
    path('api/immunizations/schedules', immunizations.immunization_schedules),
    path('api/immunizations/schedules/info', immunizations.immunization_schedule_info),
    path('api/immunizations/coverage', immunizations.immunization_coverage),
    path('api/immunizations/vaccine-types', immunizations.vaccine_types),
    path('api/immunizations/bulk-import', immunizations.immunization_bulk_import),
    path('api/immunizations/export', immunizations.immunization_export),
    path('api/immunizations/patient/<int:patient_id>', immunizations.immunization_patient_history),
    path('api/immunizations/<int:pk>', immunizations.immunization_detail),

    # Disease surveillance
    path('api/diseases', diseases.diseases_catalogue),
    path('api/diseases/statistics', diseases.disease_statistics),
    path('api/diseases/outbreaks', diseases.outbreaks),
    path('api/diseases/cases', diseases.cases_list),
    path('api/diseases/cases/<int:pk>', diseases.case_detail),
    path('api/diseases/cases/<int:pk>/contacts', diseases.case_contacts),

    # Family planning
    path('api/family-planning/clients', family_planning.clients_list),
    path('api/family-planning/clients/search', family_planning.client_search),
    path('api/family-planning/clients/<int:pk>', family_planning.client_detail),
    path('api/family-planning/methods', family_planning.methods),
    path('api/family-planning/statistics', family_planning.family_planning_statistics),

    # Users and administration
    path('api/users', users.users_list),
    path('api/users/<int:pk>', users.user_detail),
    path('api/users/<int:pk>/approve', users.user_approve),
    path('api/users/<int:pk>/reject', users.user_reject),
    path('api/users/<int:pk>/role', users.user_role),
    path('api/users/<int:pk>/logs', users.user_logs),
    path('api/admin/audit-logs', users.audit_logs),

    # Lookups and reports
    path('api/locations/states', locations.states),
    path('api/locations/lgas', locations.lgas),
    path('api/reports/general', reports.general_report),
    path('api/reports/export', reports.export_report),
]
