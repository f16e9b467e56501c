"""
Activity logging for compliance.

``log_activity`` is best-effort: a failure to write the audit row is
logged and swallowed so that it never breaks the operation being
audited.  Services that want to emit events take a recorder argument
(anything with a ``record`` method); ``default_recorder`` returns the
database backed one and ``NullRecorder`` discards events.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from clinical.models import AuditLog

logger = logging.getLogger(__name__)

User = get_user_model()

SENSITIVE_FIELDS = ('password', 'token', 'refresh', 'access')


def sanitize_body(body: Any) -> Any:
    if not isinstance(body, dict):
        return body
    sanitized = dict(body)
    for key in SENSITIVE_FIELDS:
        if sanitized.get(key):
            sanitized[key] = '***'
    return sanitized


def log_activity(*, user=None, action: str, entity_type: str, entity_id: Optional[Any] = None,
                 description: Optional[str] = None, ip_address: Optional[str] = None,
                 user_agent: Optional[str] = None, changes: Optional[Dict[str, Any]] = None,
                 metadata: Optional[Dict[str, Any]] = None) -> Optional[AuditLog]:
    if not (isinstance(user, User) and user.pk):
        user = None
    try:
        # savepoint so a failed insert does not poison an outer transaction
        with transaction.atomic():
            return AuditLog.objects.create(
                user=user,
                user_email=getattr(user, 'email', None) or None,
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                description=description,
                ip_address=ip_address,
                user_agent=user_agent,
                changes=changes,
                metadata=metadata,
            )
    except (DatabaseError, TypeError, ValueError):
        logger.exception('Failed to record audit activity %s on %s', action, entity_type)
        return None


def get_activity_logs(*, user_id: Optional[int] = None, entity_type: Optional[str] = None,
                      action: Optional[str] = None, start_date: Optional[datetime] = None,
                      end_date: Optional[datetime] = None, limit: Optional[int] = None):
    qs = AuditLog.objects.select_related('user')
    if user_id:
        qs = qs.filter(user_id=user_id)
    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if action:
        qs = qs.filter(action=action)
    if start_date:
        qs = qs.filter(created_at__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__lte=end_date)
    return qs.order_by('-created_at', '-id')[: limit or 100]


def format_log(log: AuditLog) -> dict:
    return {
        'id': log.id,
        'userId': log.user_id,
        'userEmail': log.user_email,
        'action': log.action,
        'entityType': log.entity_type,
        'entityId': log.entity_id,
        'description': log.description,
        'ipAddress': log.ip_address,
        'userAgent': log.user_agent,
        'changes': log.changes,
        'metadata': log.metadata,
        'createdAt': log.created_at.isoformat(),
    }


class AuditRecorder:
    """Records domain events into the audit log."""

    def record(self, action: str, entity_type: str, entity_id: Any = None, *, user=None,
               description: Optional[str] = None, changes: Optional[dict] = None,
               metadata: Optional[dict] = None) -> None:
        log_activity(user=user, action=action, entity_type=entity_type, entity_id=entity_id,
                     description=description, changes=changes, metadata=metadata)


class NullRecorder:
    def record(self, *args, **kwargs) -> None:
        return None


def default_recorder() -> AuditRecorder:
    return AuditRecorder()


def safe_record(recorder, *args, **kwargs) -> None:
    """Call ``recorder.record`` without ever letting it fail the caller."""
    if recorder is None:
        return
    try:
        recorder.record(*args, **kwargs)
    except Exception:
        logger.warning('Event recorder %r failed', recorder, exc_info=True)
