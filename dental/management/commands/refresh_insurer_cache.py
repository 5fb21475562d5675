import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.management.base import BaseCommand
from django.utils import timezone

from dental.exceptions import InsurerConfigError, InsurerError
from dental.services import reports
from dental.services.insurance import jubilee, smart

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Refresh insurer tokens, Jubilee price lists and the dashboard cache; broadcast a refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        keys_refreshed = []

        for provider, refresh in ((jubilee.PROVIDER, jubilee.authenticate), (smart.PROVIDER, smart.refresh_token)):
            try:
                refresh()
                keys_refreshed.append(f"token:{provider}")
            except InsurerConfigError:
                self.stdout.write(self.style.WARNING(f"skip {provider}: not configured"))
            except InsurerError as e:
                logger.warning("token refresh for %s failed: %s", provider, e)
                self.stdout.write(self.style.ERROR(f"{provider} token: {e}"))

        for kind in jubilee.LIST_KINDS:
            try:
                result = jubilee.price_list(kind)
            except InsurerError as e:
                self.stdout.write(self.style.ERROR(f"jubilee {kind} list: {e}"))
                continue
            if not result.get("cached"):
                keys_refreshed.append(f"jubilee:{kind}")

        reports.cached_dashboard_stats(refresh=True)
        keys_refreshed.append(f"dashboard:{timezone.localdate().isoformat()}")

        channel_layer = get_channel_layer()
        if channel_layer is not None:
            event = {"type": "broadcast.refresh", "ts": now.isoformat(), "keys": keys_refreshed}
            async_to_sync(channel_layer.group_send)("notifications", event)

        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {now}"))
