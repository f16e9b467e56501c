"""
Database models for the clinicboard backend.

These models capture the concepts the dashboard works with: users and
their roles, doctor/nurse staff profiles with their weekly availability
windows, patients with their clinical state and its transition log,
and the audit trail of mutating API calls.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model with a role.

    Roles mirror the dashboard roles: 'ADMIN', 'DOCTOR', 'NURSE' and
    'PATIENT'.  Staff specific data lives in :class:`Doctor` and
    :class:`Nurse`, patient data in :class:`Patient`.
    """
    ROLE_ADMIN = 'ADMIN'
    ROLE_DOCTOR = 'DOCTOR'
    ROLE_NURSE = 'NURSE'
    ROLE_PATIENT = 'PATIENT'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_PATIENT, 'Patient'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    phone = models.CharField(max_length=20, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Doctor(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    specialization = models.CharField(max_length=255, blank=True)
    department = models.CharField(max_length=255, blank=True)
    license_number = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Dr. {self.user.get_full_name() or self.user.username}"


class Nurse(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='nurse_profile')
    ward = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.user.get_full_name() or self.user.username


class PatientState(models.TextChoices):
    """Coarse clinical-workflow stage tracked per patient."""
    WAITING = 'WAITING', 'Waiting'
    IN_APPOINTMENT = 'IN_APPOINTMENT', 'In appointment'
    IN_OPERATION = 'IN_OPERATION', 'In operation'
    IN_WARD = 'IN_WARD', 'In ward'
    ADMITTED = 'ADMITTED', 'Admitted'
    DISCHARGED = 'DISCHARGED', 'Discharged'


class Patient(models.Model):
    """A patient record.

    ``current_state`` is only changed through
    :func:`clinical.services.patient_states.transition`, which writes the
    matching :class:`PatientStateLog` row in the same transaction.
    Walk-in records may exist without a login, hence the nullable user.
    """
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_profile'
    )
    name = models.CharField(max_length=255)
    gender = models.CharField(max_length=10, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    blood_type = models.CharField(max_length=5, blank=True)
    # Dashboard counters filter on this column constantly
    current_state = models.CharField(
        max_length=20, choices=PatientState.choices, default=PatientState.WAITING, db_index=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.current_state})"


class PatientStateLog(models.Model):
    """Immutable record of one patient state transition."""
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='state_logs')
    from_state = models.CharField(max_length=20, choices=PatientState.choices, null=True, blank=True)
    to_state = models.CharField(max_length=20, choices=PatientState.choices)
    context = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['patient', 'created_at'], name='clinical_pa_patient_8d1f2e_idx'),
        ]

    # Guards instance writes only; queryset update() and delete() bypass them.
    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("PatientStateLog entries are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("PatientStateLog entries are append-only")

    def __str__(self) -> str:
        return f"{self.patient_id}: {self.from_state} -> {self.to_state}"


class WeeklyWindow(models.Model):
    """A recurring weekly time range.

    ``day_of_week`` follows the dashboard convention 0=Sunday..6=Saturday.
    Times are zero padded ``HH:mm`` strings so that string comparison is
    numeric comparison.  An ``end_time`` earlier than ``start_time`` marks
    an overnight window anchored on ``day_of_week``.
    """
    DAY_CHOICES = [
        (0, 'Sunday'),
        (1, 'Monday'),
        (2, 'Tuesday'),
        (3, 'Wednesday'),
        (4, 'Thursday'),
        (5, 'Friday'),
        (6, 'Saturday'),
    ]
    day_of_week = models.PositiveSmallIntegerField(choices=DAY_CHOICES)
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)

    class Meta:
        abstract = True

    @property
    def is_overnight(self) -> bool:
        return bool(self.start_time and self.end_time and self.end_time < self.start_time)


class DoctorAvailability(WeeklyWindow):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='availability')
    is_available = models.BooleanField(default=True)

    class Meta:
        indexes = [
            models.Index(fields=['day_of_week', 'is_available'], name='clinical_do_day_of__5b0c7a_idx'),
        ]

    def __str__(self) -> str:
        return f"Availability(d={self.doctor_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})"


class ShiftStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    INACTIVE = 'INACTIVE', 'Inactive'


class DoctorShift(WeeklyWindow):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='shifts')
    status = models.CharField(max_length=10, choices=ShiftStatus.choices, default=ShiftStatus.ACTIVE)
    location = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"DoctorShift(d={self.doctor_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})"


class NurseShift(WeeklyWindow):
    nurse = models.ForeignKey(Nurse, on_delete=models.CASCADE, related_name='shifts')
    status = models.CharField(max_length=10, choices=ShiftStatus.choices, default=ShiftStatus.ACTIVE)
    ward = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['day_of_week', 'status'], name='clinical_nu_day_of__9e4d31_idx'),
        ]

    def __str__(self) -> str:
        return f"NurseShift(n={self.nurse_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})"


class AuditLog(models.Model):
    """One recorded activity, written by the audit middleware or a service."""
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs')
    user_email = models.CharField(max_length=254, blank=True, null=True)
    action = models.CharField(max_length=64)
    entity_type = models.CharField(max_length=64)
    entity_id = models.CharField(max_length=64, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    ip_address = models.CharField(max_length=64, blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    changes = models.JSONField(blank=True, null=True)
    metadata = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinical_au_action_3c7e90_idx'),
            models.Index(fields=['entity_type', 'entity_id', 'created_at'], name='clinical_au_entity__a41b6f_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.entity_type}:{self.user_id}@{self.created_at:%F %T}"
