"""
Django admin registrations for the clinical models.

Superusers can inspect staff, patients and schedules from ``/admin/``.
State history and audit rows are append-only, so their admins are
read-only.
"""

from django.contrib import admin

from .models import (
    User,
    Doctor,
    Nurse,
    Patient,
    PatientStateLog,
    DoctorAvailability,
    DoctorShift,
    NurseShift,
    AuditLog,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'email', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name', 'email')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'specialization', 'department')
    search_fields = ('user__username', 'specialization', 'department')


@admin.register(Nurse)
class NurseAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'ward')
    search_fields = ('user__username', 'ward')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'current_state', 'updated_at')
    list_filter = ('current_state',)
    search_fields = ('name', 'phone')
    # state changes go through the transition service so history stays complete
    readonly_fields = ('current_state',)


@admin.register(PatientStateLog)
class PatientStateLogAdmin(ReadOnlyAdmin):
    list_display = ('patient', 'from_state', 'to_state', 'created_at')
    list_filter = ('to_state',)


@admin.register(DoctorAvailability)
class DoctorAvailabilityAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'day_of_week', 'start_time', 'end_time', 'is_available')
    list_filter = ('day_of_week', 'is_available')


@admin.register(DoctorShift)
class DoctorShiftAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'day_of_week', 'start_time', 'end_time', 'status', 'location')
    list_filter = ('day_of_week', 'status')


@admin.register(NurseShift)
class NurseShiftAdmin(admin.ModelAdmin):
    list_display = ('nurse', 'day_of_week', 'start_time', 'end_time', 'status', 'ward')
    list_filter = ('day_of_week', 'status')


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ('created_at', 'action', 'entity_type', 'entity_id', 'user_email')
    list_filter = ('action', 'entity_type')
    search_fields = ('user_email', 'entity_id', 'description')
