"""
Patient state transition endpoints.

Admins, doctors and nurses move a patient between clinical states and
read the resulting history.  Business rules live in
:mod:`clinical.services.patient_states`; these views only validate the
request and shape the response.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import IsClinicalStaff
from clinical.serializers.patient_state import TransitionSerializer
from clinical.services import patient_states
from clinical.views.patients import format_patient


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalStaff])
def transition_state(request):
    """Move a patient to ``toState``; 400 if already there, 404 if unknown."""
    s = TransitionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    patient = patient_states.transition(
        vd['patientId'], vd['toState'], vd.get('context'), actor=request.user,
    )
    return Response({'ok': True, 'data': format_patient(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalStaff])
def state_history(request, patient_id: int):
    """Return the patient's transitions, newest first."""
    entries = patient_states.get_history(patient_id)
    return Response({'ok': True, 'data': [patient_states.format_log_entry(e) for e in entries]})
