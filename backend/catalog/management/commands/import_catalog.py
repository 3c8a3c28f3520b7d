"""
Management command to import catalog records from JSON.

Accepts the output of export_catalog as well as the flat metadata file of
the legacy server, whose records use Portuguese keys and carry no status
history.

Usage:
    python manage.py import_catalog data/catalog.json
    python manage.py import_catalog data/metadata.json --replace
"""

import json
from pathlib import Path, PurePosixPath

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from catalog import taxonomy
from catalog.serializers import MediaAssetDocumentSerializer, to_camel
from catalog.services import CatalogStore, NamingService

IMPORT_NOTE = 'imported'

# Legacy key -> document key
LEGACY_KEYS = {
    'tema': 'mainTheme',
    'ponto': 'capturePoint',
    'tipoProjeto': 'projectType',
    'funcaoHistorica': 'historicalFunction',
    'evento': 'event',
    'extensao': 'extension',
    'uploadedAt': 'createdAt',
}


def normalize_document(raw):
    """
    Map a stored record onto the current document shape.

    Legacy keys are renamed, null values dropped, and identity fields the
    legacy server never stored are derived from the file name. The single
    legacy `nucleo` goes to the nucleus field whose taxonomy table lists it.
    """
    document = {}
    for key, value in raw.items():
        if value is None:
            continue
        document[LEGACY_KEYS.get(key, key)] = value

    nucleus = document.pop('nucleo', None)
    if nucleus:
        field = taxonomy.nucleus_field_for(nucleus) or 'livestock_nucleus'
        document.setdefault(to_camel(field), nucleus)

    file_path = document.get('filePath', '')
    if not document.get('fileName') and file_path:
        document['fileName'] = PurePosixPath(file_path).name

    file_name = document.get('fileName', '')
    if not document.get('canonicalName') and file_name:
        document['canonicalName'] = PurePosixPath(file_name).stem

    if not document.get('extension') and file_name:
        document['extension'] = NamingService.extension_from_filename(file_name)

    if not document.get('kind') and document.get('extension'):
        document['kind'] = NamingService.detect_kind(document['extension'])

    if not document.get('captureDate'):
        year, month, day = (str(document.get(k, '')) for k in ('ano', 'mes', 'dia'))
        if len(year) == 4 and year.isdigit() and month.isdigit() and day.isdigit():
            document['captureDate'] = f'{year}-{int(month):02d}-{int(day):02d}'

    status = taxonomy.status_name_for(document.get('status') or '') or taxonomy.INITIAL_STATUS
    document['status'] = status

    if not document.get('statusHistory'):
        document['statusHistory'] = [{
            'status': status,
            'timestamp': document.get('createdAt') or timezone.now().isoformat(),
            'actor': 'system',
            'note': IMPORT_NOTE,
        }]

    return document


class Command(BaseCommand):
    help = 'Import catalog records from a JSON array (export_catalog output or legacy metadata file)'

    def add_arguments(self, parser):
        parser.add_argument('path', help='JSON file to import')
        parser.add_argument(
            '--replace',
            action='store_true',
            help='Delete every existing record before importing',
        )

    def handle(self, *args, **options):
        path = Path(options['path'])
        try:
            raw_documents = json.loads(path.read_text(encoding='utf-8'))
        except OSError as e:
            raise CommandError(f'Cannot read {path}: {e}')
        except json.JSONDecodeError as e:
            raise CommandError(f'{path} is not valid JSON: {e}')

        if not isinstance(raw_documents, list):
            raise CommandError(f'{path} must contain a JSON array of records')

        created = updated = 0
        with transaction.atomic():
            if options['replace']:
                deleted = CatalogStore.load_all().delete()[0]
                self.stdout.write(self.style.WARNING(f'Deleted {deleted} existing records'))

            for index, raw in enumerate(raw_documents):
                if not isinstance(raw, dict):
                    raise CommandError(f'Record {index} is not a JSON object')

                document = normalize_document(raw)
                instance = CatalogStore.get_by_id(document.get('id'))
                serializer = MediaAssetDocumentSerializer(instance, data=document)
                if not serializer.is_valid():
                    raise CommandError(f'Record {index} ({document.get("id")}) is invalid: {serializer.errors}')

                record = serializer.save()
                if record.created_at is None:
                    record.created_at = timezone.now()
                    record.updated_at = record.updated_at or record.created_at
                    record.save(update_fields=['created_at', 'updated_at'])

                if instance is None:
                    created += 1
                else:
                    updated += 1

        self.stdout.write(self.style.SUCCESS(
            f'Imported {len(raw_documents)} records ({created} created, {updated} updated)'
        ))
