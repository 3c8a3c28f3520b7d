"""
Management command to export the catalog as JSON.

Usage:
    python manage.py export_catalog
    python manage.py export_catalog --output data/catalog.json
"""

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from catalog.serializers import MediaAssetDocumentSerializer
from catalog.services import CatalogStore


class Command(BaseCommand):
    help = 'Export every catalog record as a JSON array of camelCase documents'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            help='File to write; defaults to stdout',
        )

    def handle(self, *args, **options):
        records = CatalogStore.load_all().order_by('created_at', 'pk')
        documents = MediaAssetDocumentSerializer(records, many=True).data
        payload = json.dumps(list(documents), indent=2, ensure_ascii=False)

        output = options.get('output')
        if not output:
            self.stdout.write(payload)
            return

        path = Path(output)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload + '\n', encoding='utf-8')
        except OSError as e:
            raise CommandError(f'Cannot write {path}: {e}')

        self.stdout.write(self.style.SUCCESS(f'Exported {len(documents)} records to {path}'))
