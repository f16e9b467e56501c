from typing import Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinical.models import Doctor, DoctorAvailability, Nurse
from clinical.services.availability import is_on_shift_now
from clinical.services.kpi import invalidate_kpis


def _paginate(rows: list, page: Optional[int], page_size: Optional[int]) -> list:
    if page and page_size:
        start = (page-1)*page_size
        return rows[start:start + page_size]
    return rows


def _name(user) -> str:
    return user.get_full_name() or user.username


def list_doctors(*, q: Optional[str]=None, on_shift: Optional[bool]=None, now=None,
                 page: Optional[int]=None, page_size: Optional[int]=None) -> tuple[list[dict], int]:
    now = now or timezone.localtime()
    qs = Doctor.objects.select_related('user').prefetch_related('availability').order_by('id')
    if q:
        qs = qs.filter(Q(user__first_name__icontains=q) | Q(user__last_name__icontains=q)
                       | Q(user__username__icontains=q) | Q(specialization__icontains=q))

    data = []
    for d in qs:
        windows = list(d.availability.all())
        badge = is_on_shift_now(windows, now)
        if on_shift is not None and badge != on_shift:
            continue
        data.append({
            'id': d.id,
            'userId': d.user_id,
            'name': _name(d.user),
            'specialization': d.specialization,
            'department': d.department,
            'onShift': badge,
            'availability': [format_window(w) for w in windows],
        })
    return _paginate(data, page, page_size), len(data)


def list_nurses(*, q: Optional[str]=None, on_shift: Optional[bool]=None, now=None,
                page: Optional[int]=None, page_size: Optional[int]=None) -> tuple[list[dict], int]:
    now = now or timezone.localtime()
    qs = Nurse.objects.select_related('user').prefetch_related('shifts').order_by('id')
    if q:
        qs = qs.filter(Q(user__first_name__icontains=q) | Q(user__last_name__icontains=q)
                       | Q(user__username__icontains=q) | Q(ward__icontains=q))

    data = []
    for n in qs:
        shifts = list(n.shifts.all())
        badge = is_on_shift_now(shifts, now)
        if on_shift is not None and badge != on_shift:
            continue
        data.append({
            'id': n.id,
            'userId': n.user_id,
            'name': _name(n.user),
            'ward': n.ward,
            'onShift': badge,
            'shifts': [format_window(s) for s in shifts],
        })
    return _paginate(data, page, page_size), len(data)


def get_doctor_or_404(doctor_id) -> Doctor:
    doctor = Doctor.objects.select_related('user').filter(id=doctor_id).first()
    if not doctor:
        raise NotFound('Doctor not found')
    return doctor


def get_nurse_or_404(nurse_id) -> Nurse:
    nurse = Nurse.objects.select_related('user').filter(id=nurse_id).first()
    if not nurse:
        raise NotFound('Nurse not found')
    return nurse


def replace_availability(doctor: Doctor, windows: list[dict]) -> list[DoctorAvailability]:
    """Replace a doctor's weekly availability with ``windows``."""
    with transaction.atomic():
        DoctorAvailability.objects.filter(doctor=doctor).delete()
        DoctorAvailability.objects.bulk_create([
            DoctorAvailability(
                doctor=doctor,
                day_of_week=w['dayOfWeek'],
                start_time=w['startTime'],
                end_time=w['endTime'],
                is_available=w.get('isAvailable', True),
            )
            for w in windows
        ])
    invalidate_kpis()
    return list(DoctorAvailability.objects.filter(doctor=doctor).order_by('day_of_week', 'start_time'))


def format_window(w) -> dict:
    data = {
        'id': w.id,
        'dayOfWeek': w.day_of_week,
        'startTime': w.start_time,
        'endTime': w.end_time,
        'overnight': w.is_overnight,
    }
    if hasattr(w, 'is_available'):
        data['isAvailable'] = w.is_available
    if hasattr(w, 'status'):
        data['status'] = w.status
    if hasattr(w, 'location'):
        data['location'] = w.location
    if hasattr(w, 'ward'):
        data['ward'] = w.ward
    return data
