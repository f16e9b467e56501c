from django.conf import settings
from django.core.cache import cache
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinical.permissions import IsAdminRole
from clinical.serializers.audit import AuditLogQuerySerializer
from clinical.services.audit import format_log, get_activity_logs
from clinical.services.kpi import KPI_CACHE_KEY, get_kpis


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def audit_logs(request):
    """Activity log, newest first (default limit 100)."""
    q = AuditLogQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    logs = get_activity_logs(
        user_id=vd.get('userId'),
        entity_type=vd.get('entityType'),
        action=vd.get('action'),
        start_date=vd.get('startDate'),
        end_date=vd.get('endDate'),
        limit=vd.get('limit'),
    )
    return Response({'ok': True, 'data': [format_log(log) for log in logs]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def kpis(request):
    """Dashboard KPIs (cached for KPI_CACHE_SECONDS)."""
    cached = cache.get(KPI_CACHE_KEY)
    if cached:
        return Response(cached)
    payload = {'ok': True, 'data': get_kpis()}
    cache.set(KPI_CACHE_KEY, payload, settings.KPI_CACHE_SECONDS)
    return Response(payload)
