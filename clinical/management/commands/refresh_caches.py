from django.conf import settings
from django.core.cache import cache
from django.core.management.base import BaseCommand
from django.utils import timezone

from clinical.services.kpi import KPI_CACHE_KEY, get_kpis


class Command(BaseCommand):
    help = "Recompute the dashboard KPIs and warm the cache."

    def handle(self, *args, **options):
        now = timezone.localtime()
        payload = {'ok': True, 'data': get_kpis(now)}
        cache.set(KPI_CACHE_KEY, payload, settings.KPI_CACHE_SECONDS)
        self.stdout.write(self.style.SUCCESS(f"Refreshed {KPI_CACHE_KEY} at {now}"))
