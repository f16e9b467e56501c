"""
Shift management endpoints (administrators only).
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.models import DoctorShift, NurseShift
from clinical.permissions import IsAdminRole
from clinical.serializers.shift import DoctorShiftCreateSerializer, NurseShiftCreateSerializer, ShiftStatusSerializer
from clinical.services import shifts
from clinical.services.staff import format_window, get_doctor_or_404, get_nurse_or_404


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def doctor_shifts(request, pk: int):
    """GET lists the shifts of doctor ``pk``; DELETE removes shift ``pk``."""
    if request.method == 'DELETE':
        shifts.delete_shift(DoctorShift, pk)
        return Response({'ok': True})
    return Response({'ok': True, 'data': [format_window(s) for s in shifts.doctor_shifts(pk)]})


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def nurse_shifts(request, pk: int):
    """GET lists the shifts of nurse ``pk``; DELETE removes shift ``pk``."""
    if request.method == 'DELETE':
        shifts.delete_shift(NurseShift, pk)
        return Response({'ok': True})
    return Response({'ok': True, 'data': [format_window(s) for s in shifts.nurse_shifts(pk)]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def doctor_shift_create(request):
    s = DoctorShiftCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    shift = shifts.create_doctor_shift(
        get_doctor_or_404(vd['doctorId']),
        day_of_week=vd['dayOfWeek'], start_time=vd['startTime'], end_time=vd['endTime'],
        status=vd['status'], location=vd['location'],
    )
    return Response({'ok': True, 'data': format_window(shift)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def nurse_shift_create(request):
    s = NurseShiftCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    shift = shifts.create_nurse_shift(
        get_nurse_or_404(vd['nurseId']),
        day_of_week=vd['dayOfWeek'], start_time=vd['startTime'], end_time=vd['endTime'],
        status=vd['status'], ward=vd['ward'],
    )
    return Response({'ok': True, 'data': format_window(shift)}, status=status.HTTP_201_CREATED)


def _set_status(request, model, shift_id):
    s = ShiftStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    shift = shifts.update_shift_status(model, shift_id, s.validated_data['status'])
    return Response({'ok': True, 'data': format_window(shift)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def doctor_shift_status(request, pk: int):
    return _set_status(request, DoctorShift, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def nurse_shift_status(request, pk: int):
    return _set_status(request, NurseShift, pk)

