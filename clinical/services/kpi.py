import logging
from datetime import datetime
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError
from django.db.models import Count, Prefetch
from django.utils import timezone

from clinical.models import Doctor, DoctorAvailability, Nurse, NurseShift, Patient, PatientState, ShiftStatus
from clinical.services.availability import count_on_shift, relevant_days

logger = logging.getLogger(__name__)

User = get_user_model()

KPI_CACHE_KEY = 'kpi:dashboard'


def invalidate_kpis() -> None:
    """Drop the cached dashboard KPIs.

    Called once the write it follows has committed, so a cache outage is
    logged rather than reported as a failure of that write.
    """
    try:
        cache.delete(KPI_CACHE_KEY)
    except Exception:
        logger.warning('Could not invalidate %s', KPI_CACHE_KEY, exc_info=True)


def doctors_on_shift(now: Optional[datetime] = None) -> int:
    days = relevant_days(now)
    doctors = Doctor.objects.filter(
        availability__day_of_week__in=days, availability__is_available=True,
    ).distinct().prefetch_related(
        Prefetch('availability',
                 queryset=DoctorAvailability.objects.filter(day_of_week__in=days, is_available=True),
                 to_attr='todays_windows'),
    )
    return count_on_shift(doctors, lambda d: d.todays_windows, now)


def nurses_on_shift(now: Optional[datetime] = None) -> int:
    days = relevant_days(now)
    nurses = Nurse.objects.filter(
        shifts__day_of_week__in=days, shifts__status=ShiftStatus.ACTIVE,
    ).distinct().prefetch_related(
        Prefetch('shifts',
                 queryset=NurseShift.objects.filter(day_of_week__in=days, status=ShiftStatus.ACTIVE),
                 to_attr='todays_windows'),
    )
    return count_on_shift(nurses, lambda n: n.todays_windows, now)


def get_kpis(now: Optional[datetime] = None) -> dict:
    now = now or timezone.localtime()
    by_state = {
        row['current_state']: row['n']
        for row in Patient.objects.values('current_state').annotate(n=Count('id'))
    }
    waiting = by_state.get(PatientState.WAITING, 0)
    in_appointment = by_state.get(PatientState.IN_APPOINTMENT, 0)

    try:
        active_doctors = doctors_on_shift(now)
    except DatabaseError:
        logger.exception('Error calculating doctors on shift')
        active_doctors = Doctor.objects.filter(availability__is_available=True).distinct().count()

    return {
        'users': {'total': User.objects.count()},
        'patients': {
            'total': sum(by_state.values()),
            'waiting': waiting,
            'inAppointment': in_appointment,
            'inQueue': waiting + in_appointment,
            'inOperation': by_state.get(PatientState.IN_OPERATION, 0),
            'inWard': by_state.get(PatientState.IN_WARD, 0),
            'admitted': by_state.get(PatientState.ADMITTED, 0),
            'discharged': by_state.get(PatientState.DISCHARGED, 0),
        },
        'staff': {
            'doctors': {'total': Doctor.objects.count(), 'onShift': active_doctors},
            'nurses': {'total': Nurse.objects.count(), 'onShift': nurses_on_shift(now)},
        },
        'generatedAt': now.isoformat(),
    }
