"""
Django management command to import raw messages into the Maildir

Usage:
    python manage.py import_mail message1.eml message2.eml
"""
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from app_mailserver.services.service_factory import get_query_service, initialize_store

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Import RFC 822 message files into the catch-all mailbox"

    def add_arguments(self, parser):
        parser.add_argument('files', nargs='+', help='Message files (.eml) to import')

    def handle(self, *args, **options):
        messages = []
        for name in options['files']:
            path = Path(name)
            try:
                messages.append((path.name, path.read_bytes()))
            except OSError as e:
                raise CommandError(f"Cannot read {name}: {e}") from e

        initialize_store()
        result = get_query_service().import_messages(messages)

        for stored in result['filenames']:
            self.stdout.write(self.style.SUCCESS(f"Imported: {stored}"))
        for error in result['errors']:
            self.stdout.write(self.style.WARNING(f"Failed: {error['name']}: {error['error']}"))

        self.stdout.write(f"Imported {result['imported']}, failed {result['failed']}")
