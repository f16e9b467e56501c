import json
import logging

from django.conf import settings
from django.http.request import RawPostDataException

from clinical.services.audit import log_activity, sanitize_body

logger = logging.getLogger(__name__)


class AuditMiddleware:
    """Record every mutating API call in the audit log.

    The request body is read before the view runs so that it stays
    available to DRF afterwards.  Recording failures never change the
    response.
    """
    AUDITED_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if (not getattr(settings, 'AUDIT_ENABLED', True)
                or request.method not in self.AUDITED_METHODS
                or any(path.startswith(p) for p in getattr(settings, 'AUDIT_SKIP_PREFIXES', ()))):
            return self.get_response(request)

        body = self._read_body(request)
        response = self.get_response(request)
        try:
            self._record(request, response, body)
        except Exception:
            logger.warning('Audit middleware failed for %s %s', request.method, path, exc_info=True)
        return response

    @staticmethod
    def _read_body(request):
        try:
            raw = request.body
        except RawPostDataException:
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            return None

    def _record(self, request, response, body):
        path = request.path
        user = getattr(request, 'user', None)
        if user is not None and not getattr(user, 'is_authenticated', False):
            user = None
        action = self.action_for(request.method, path)
        entity_type = self.entity_for(path)
        log_activity(
            user=user,
            action=action,
            entity_type=entity_type,
            description=f'{action} {entity_type}',
            ip_address=self.client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT'),
            changes=sanitize_body(body) if body is not None else None,
            metadata={'method': request.method, 'path': path, 'statusCode': response.status_code},
        )

    @staticmethod
    def action_for(method: str, path: str) -> str:
        if '/login' in path:
            return 'LOGIN'
        if '/register' in path:
            return 'REGISTER'
        if '/logout' in path:
            return 'LOGOUT'
        return {'POST': 'CREATE', 'PUT': 'UPDATE', 'PATCH': 'UPDATE', 'DELETE': 'DELETE'}.get(method, 'UNKNOWN')

    @staticmethod
    def entity_for(path: str) -> str:
        # order matters: patient-states before patients
        for fragment, entity in (
            ('/patient-states', 'PatientState'),
            ('/patients', 'Patient'),
            ('/shifts', 'Shift'),
            ('/doctors', 'Doctor'),
            ('/nurses', 'Nurse'),
            ('/users', 'User'),
            ('/auth', 'User'),
        ):
            if fragment in path:
                return entity
        return 'System'

    @staticmethod
    def client_ip(request):
        forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
        if forwarded:
            return forwarded.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')
