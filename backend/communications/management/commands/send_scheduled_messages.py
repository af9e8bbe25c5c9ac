from django.core.management.base import BaseCommand
from backend.communications.services import process_scheduled_messages


class Command(BaseCommand):
    help = 'Send every pending message whose scheduled time has passed'

    def handle(self, *args, **options):
        processed = process_scheduled_messages()
        self.stdout.write(self.style.SUCCESS(f'Processed {processed} scheduled message(s)'))
