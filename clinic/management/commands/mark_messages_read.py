from django.core.management.base import BaseCommand

from clinic.models import Message


class Command(BaseCommand):
    help = "Mark every unread chat message as read (clears stale unread badges)."

    def handle(self, *args, **options):
        updated = Message.objects.filter(read=False).update(read=True)
        self.stdout.write(self.style.SUCCESS(f"Marked {updated} messages as read."))
