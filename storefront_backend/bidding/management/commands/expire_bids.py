# bidding/management/commands/expire_bids.py

from django.core.management.base import BaseCommand

from bidding.services import bid_service


class Command(BaseCommand):
    help = "Mark open bids past their end time as expired."

    def handle(self, *args, **options):
        count = bid_service.expire_bids()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} bid(s)"))
