from rest_framework.exceptions import NotFound

from clinical.models import Doctor, DoctorShift, Nurse, NurseShift, ShiftStatus
from clinical.services.kpi import invalidate_kpis


def doctor_shifts(doctor_id):
    return DoctorShift.objects.filter(doctor_id=doctor_id).order_by('day_of_week', 'start_time')


def nurse_shifts(nurse_id):
    return NurseShift.objects.filter(nurse_id=nurse_id).order_by('day_of_week', 'start_time')


def create_doctor_shift(doctor: Doctor, *, day_of_week: int, start_time: str, end_time: str,
                        status: str = ShiftStatus.ACTIVE, location: str = '') -> DoctorShift:
    shift = DoctorShift.objects.create(
        doctor=doctor, day_of_week=day_of_week, start_time=start_time, end_time=end_time,
        status=status or ShiftStatus.ACTIVE, location=location or '',
    )
    invalidate_kpis()
    return shift


def create_nurse_shift(nurse: Nurse, *, day_of_week: int, start_time: str, end_time: str,
                       status: str = ShiftStatus.ACTIVE, ward: str = '') -> NurseShift:
    shift = NurseShift.objects.create(
        nurse=nurse, day_of_week=day_of_week, start_time=start_time, end_time=end_time,
        status=status or ShiftStatus.ACTIVE, ward=ward or '',
    )
    invalidate_kpis()
    return shift


def _get_or_404(model, shift_id, label: str):
    shift = model.objects.filter(id=shift_id).first()
    if not shift:
        raise NotFound(f'{label} shift not found')
    return shift


def update_shift_status(model, shift_id, status: str):
    shift = _get_or_404(model, shift_id, 'Doctor' if model is DoctorShift else 'Nurse')
    shift.status = status
    shift.save(update_fields=['status'])
    invalidate_kpis()
    return shift


def delete_shift(model, shift_id) -> None:
    shift = _get_or_404(model, shift_id, 'Doctor' if model is DoctorShift else 'Nurse')
    shift.delete()
    invalidate_kpis()
