from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.cache import cache
from django.core.management.base import BaseCommand
from django.utils import timezone

from records.models import Facility
from records.services.antenatal import build_antenatal_statistics
from records.services.births import build_birth_statistics
from records.services.deaths import build_death_summary
from records.services.diseases import UPDATES_GROUP, build_disease_statistics
from records.services.facilities import build_facility_statistics
from records.services.family_planning import build_family_planning_statistics
from records.services.immunizations import build_immunization_statistics
from records.services.reports import build_general_report
from records.services.stats_cache import cache_key

BUILDERS = {
    'facilities': build_facility_statistics,
    'births': build_birth_statistics,
    'deaths': build_death_summary,
    'antenatal': build_antenatal_statistics,
    'immunizations': build_immunization_statistics,
    'diseases': build_disease_statistics,
    'family-planning': build_family_planning_statistics,
    'reports': build_general_report,
}


class Command(BaseCommand):
    help = "Warm the statistics caches for every scope and broadcast a WebSocket refresh event."

    def add_arguments(self, parser):
        parser.add_argument('--no-broadcast', action='store_true', help="Skip the WebSocket notification.")

    def handle(self, *args, **options):
        now = timezone.now()
        scopes = [None] + list(Facility.objects.values_list('id', flat=True))
        keys_refreshed = []
        for module, builder in BUILDERS.items():
            for facility_id in scopes:
                ck = cache_key(module, facility_id)
                cache.set(ck, builder(facility_id), settings.STATS_CACHE_SECONDS)
                keys_refreshed.append(ck)

        if not options['no_broadcast']:
            channel_layer = get_channel_layer()
            if channel_layer is not None:
                event = {
                    "type": "broadcast.refresh",
                    "version": int(now.timestamp()),
                    "ts": now.isoformat(),
                    "keys": keys_refreshed[:50],
                }
                async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)

        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {now}"))
