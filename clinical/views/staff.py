"""
Doctor and nurse listings with on-shift badges.

``onShift`` is computed server side with the same predicate the KPI
aggregate uses, so the dashboard filter and the KPI tile always agree.
Query params:
  - q: optional search (name/username/specialization or ward)
  - onShift: 1|0 to keep only staff on or off shift right now
  - page, pageSize: pagination (optional)
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import IsAdminOrReadOnly
from clinical.serializers.shift import AvailabilitySerializer, StaffListQuerySerializer
from clinical.services import staff
from clinical.services.staff import format_window

TRUTHY = {'1', 'true', 'True', 'yes'}
FALSY = {'0', 'false', 'False', 'no'}


def _on_shift_param(request):
    raw = request.query_params.get('onShift')
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False
    return None


def _staff_response(request, lister):
    q = StaffListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    page, page_size = vd.get('page'), vd.get('pageSize')
    data, total = lister(q=(vd.get('q') or '').strip() or None, on_shift=_on_shift_param(request),
                         page=page, page_size=page_size)
    return Response({'ok': True, 'data': data,
                     'pagination': {'total': total, 'page': page or 1, 'pageSize': page_size or total}})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_doctors(request):
    return _staff_response(request, staff.list_doctors)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_nurses(request):
    return _staff_response(request, staff.list_nurses)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminOrReadOnly])
def doctor_availability(request, doctor_id: int):
    """Read or replace a doctor's weekly availability.

    PUT expects a list of ``{dayOfWeek, startTime, endTime, isAvailable?}``
    (or ``{"availability": [...]}``) and replaces every existing window.
    """
    doctor = staff.get_doctor_or_404(doctor_id)
    if request.method == 'GET':
        windows = doctor.availability.order_by('day_of_week', 'start_time')
        return Response({'ok': True, 'data': [format_window(w) for w in windows]})

    payload = request.data.get('availability', request.data) if isinstance(request.data, dict) else request.data
    s = AvailabilitySerializer(data=payload, many=True)
    s.is_valid(raise_exception=True)
    windows = staff.replace_availability(doctor, s.validated_data)
    return Response({'ok': True, 'data': [format_window(w) for w in windows]})
