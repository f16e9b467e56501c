"""
Patient clinical state transitions and their history.

The state graph is unconstrained: a patient may move from any state to
any other state, only a transition to the current state is refused.
Each successful transition appends one :class:`PatientStateLog` row and
updates ``Patient.current_state`` in the same transaction.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from clinical.exceptions import InvalidTransition
from clinical.models import Patient, PatientState, PatientStateLog
from clinical.services.audit import default_recorder, safe_record
from clinical.services.kpi import invalidate_kpis

logger = logging.getLogger(__name__)

STATES = frozenset(PatientState.values)


def can_transition(current: Optional[str], new: str) -> bool:
    """Return True if a patient in ``current`` may move to ``new``."""
    return new in STATES and new != current


def _get_patient_or_404(patient_id) -> Patient:
    patient = Patient.objects.filter(pk=patient_id).first()
    if not patient:
        raise NotFound('Patient not found')
    return patient


def transition(patient_id, to_state: str, context: Optional[str] = None, *, actor=None,
               recorder=None) -> Patient:
    if to_state not in STATES:
        raise ValidationError({'toState': [f'"{to_state}" is not a valid patient state']})
    patient = _get_patient_or_404(patient_id)
    if not can_transition(patient.current_state, to_state):
        raise InvalidTransition()

    with transaction.atomic():
        # Re-read under lock; another request may have moved the patient
        locked = Patient.objects.select_for_update().get(pk=patient.pk)
        from_state = locked.current_state
        if not can_transition(from_state, to_state):
            raise InvalidTransition()
        PatientStateLog.objects.create(
            patient=locked,
            from_state=from_state,
            to_state=to_state,
            context=context or None,
        )
        locked.current_state = to_state
        locked.save(update_fields=['current_state', 'updated_at'])

    logger.info('Patient %s moved %s -> %s', locked.pk, from_state, to_state)
    invalidate_kpis()
    safe_record(
        recorder if recorder is not None else default_recorder(),
        'PATIENT_STATE_TRANSITION', 'Patient', locked.pk,
        user=actor,
        description=f'{from_state} -> {to_state}',
        changes={'fromState': from_state, 'toState': to_state, 'context': context or None},
    )
    return locked


def get_history(patient_id):
    patient = _get_patient_or_404(patient_id)
    return PatientStateLog.objects.filter(patient=patient).order_by('-created_at', '-id')


def format_log_entry(entry: PatientStateLog) -> dict:
    return {
        'id': entry.id,
        'patientId': entry.patient_id,
        'fromState': entry.from_state,
        'toState': entry.to_state,
        'context': entry.context,
        'createdAt': entry.created_at.isoformat(),
    }
