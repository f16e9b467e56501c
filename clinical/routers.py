"""
URL mappings for the clinicboard API.

Trailing slashes are deliberately omitted to match the dashboard's
endpoint table.
"""
from django.urls import path, include

from .views import audit, health, patient_states, patients, shifts, staff
from .views.auth import login_view, jwt_refresh_view


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    # Patient states
    path('api/patient-states/transition', patient_states.transition_state, name='patient_state_transition'),
    path('api/patient-states/<int:patient_id>/history', patient_states.state_history, name='patient_state_history'),
    # Patients
    path('api/patients', patients.list_patients),
    path('api/patients/<int:pk>', patients.patient_detail),
    # Staff
    path('api/doctors', staff.list_doctors),
    path('api/doctors/<int:doctor_id>/availability', staff.doctor_availability),
    path('api/nurses', staff.list_nurses),
    # Shifts
    path('api/shifts/doctors', shifts.doctor_shift_create),
    path('api/shifts/nurses', shifts.nurse_shift_create),
    path('api/shifts/doctors/<int:pk>', shifts.doctor_shifts),
    path('api/shifts/nurses/<int:pk>', shifts.nurse_shifts),
    path('api/shifts/doctors/<int:pk>/status', shifts.doctor_shift_status),
    path('api/shifts/nurses/<int:pk>/status', shifts.nurse_shift_status),
    # Audit & KPIs
    path('api/audit/logs', audit.audit_logs),
    path('api/audit/kpis', audit.kpis),
]
