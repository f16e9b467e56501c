"""
Patient record views.

Read-only listing and detail for clinical staff; ``currentState`` is
changed through the patient state endpoints only.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.models import Patient
from clinical.permissions import IsClinicalStaff
from clinical.serializers.patient_state import PatientListQuerySerializer


def format_patient(patient: Patient) -> dict:
    return {
        'id': patient.id,
        'userId': patient.user_id,
        'name': patient.name,
        'gender': patient.gender,
        'dateOfBirth': patient.date_of_birth.isoformat() if patient.date_of_birth else None,
        'phone': patient.phone,
        'bloodType': patient.blood_type,
        'currentState': patient.current_state,
        'updatedAt': patient.updated_at.isoformat() if patient.updated_at else None,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalStaff])
def list_patients(request):
    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = Patient.objects.order_by('-id')
    if vd.get('state'):
        qs = qs.filter(current_state=vd['state'])
    if vd.get('q'):
        qs = qs.filter(Q(name__icontains=vd['q']) | Q(phone__icontains=vd['q']))
    total = qs.count()
    page = vd.get('page') or 1
    page_size = vd.get('pageSize') or 0
    if page_size:
        start = (page-1)*page_size
        qs = qs[start:start + page_size]
    return Response({
        'ok': True,
        'data': [format_patient(p) for p in qs],
        'pagination': {'total': total, 'page': page, 'pageSize': page_size or total},
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalStaff])
def patient_detail(request, pk: int):
    patient = Patient.objects.filter(pk=pk).first()
    if not patient:
        raise NotFound('Patient not found')
    return Response({'ok': True, 'data': format_patient(patient)})
