from checkout.services import expire_stale_sessions
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Delete expired checkout sessions that never reached a successful payment"

    def handle(self, *args, **options):
        count = expire_stale_sessions()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired checkout sessions."))
