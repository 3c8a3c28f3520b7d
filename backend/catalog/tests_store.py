"""
Unit Tests for the Catalog Store
================================
Tests cover:
- Insert and compare-and-swap update
- Stale write rejection
- Lookup, existence and delete
- Statistics and folder counts
- export_catalog / import_catalog round trip and legacy import
"""

import json
import os
import tempfile
from datetime import date, datetime, timedelta, timezone as dt_timezone
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from contracts.models import MediaAsset
from catalog.exceptions import StaleRecordError
from catalog.services import CatalogStore, StatusWorkflowService


BASE_TIME = datetime(2024, 3, 15, 12, 0, tzinfo=dt_timezone.utc)


def build_record(suffix='A1B2C3D4', status='Entrada (Bruto)', stage='00_ENTRADA', **overrides):
    canonical_name = f'20240315_VILACAN_CRIA_TERRAESERT_ENT_{suffix}'
    fields = {
        'canonical_name': canonical_name,
        'file_name': f'{canonical_name}.jpg',
        'file_path': f'{stage}/2024/03/15/{canonical_name}.jpg',
        'extension': 'jpg',
        'kind': MediaAsset.KIND_IMAGE,
        'area': 'Vila Canabrava',
        'livestock_nucleus': 'Cria',
        'main_theme': 'Terra e Sertão',
    }
    fields.update(overrides)
    record = MediaAsset(**fields)
    StatusWorkflowService.record_initial_status(record, status, 'ana', now=lambda: BASE_TIME)
    return record


class CatalogStoreTests(TestCase):
    """Tests for CatalogStore persistence."""

    # ===================
    # Upsert Tests
    # ===================

    def test_insert_sets_timestamps_and_revision(self):
        record = CatalogStore.upsert(build_record(), now=BASE_TIME)

        self.assertEqual(record.revision, 1)
        self.assertEqual(record.created_at, BASE_TIME)
        self.assertEqual(record.updated_at, BASE_TIME)
        self.assertEqual(MediaAsset.objects.count(), 1)

    def test_update_bumps_revision_and_keeps_created_at(self):
        record = CatalogStore.upsert(build_record(), now=BASE_TIME)
        later = BASE_TIME + timedelta(hours=1)

        record.area = 'Santa Maria'
        CatalogStore.upsert(record, now=later)

        stored = MediaAsset.objects.get(pk=record.pk)
        self.assertEqual(stored.revision, 2)
        self.assertEqual(stored.area, 'Santa Maria')
        self.assertEqual(stored.created_at, BASE_TIME)
        self.assertEqual(stored.updated_at, later)

    def test_upsert_does_not_duplicate(self):
        record = CatalogStore.upsert(build_record())
        CatalogStore.upsert(record)
        CatalogStore.upsert(record)
        self.assertEqual(MediaAsset.objects.count(), 1)

    def test_stale_write_rejected(self):
        record = CatalogStore.upsert(build_record())

        first = CatalogStore.get_by_id(record.pk)
        second = CatalogStore.get_by_id(record.pk)

        first.area = 'Santa Maria'
        CatalogStore.upsert(first)

        second.area = 'Jequitaí'
        with self.assertRaises(StaleRecordError):
            CatalogStore.upsert(second)

        self.assertEqual(MediaAsset.objects.get(pk=record.pk).area, 'Santa Maria')

    def test_concurrent_status_changes_do_not_lose_history(self):
        record = CatalogStore.upsert(build_record())

        first = CatalogStore.get_by_id(record.pk)
        second = CatalogStore.get_by_id(record.pk)

        StatusWorkflowService.transition(first, 'Catalogado', 'ana', '')
        CatalogStore.upsert(first)

        StatusWorkflowService.transition(second, 'Arquivado', 'bruno', '')
        with self.assertRaises(StaleRecordError):
            CatalogStore.upsert(second)

        stored = CatalogStore.get_by_id(record.pk)
        self.assertEqual([entry['status'] for entry in stored.status_history], ['Entrada (Bruto)', 'Catalogado'])

    # ===================
    # Lookup and Delete Tests
    # ===================

    def test_get_by_id_missing_returns_none(self):
        self.assertIsNone(CatalogStore.get_by_id('does-not-exist'))
        self.assertIsNone(CatalogStore.get_by_id(None))

    def test_exists_canonical_name(self):
        record = CatalogStore.upsert(build_record())
        self.assertTrue(CatalogStore.exists_canonical_name(record.canonical_name))
        self.assertFalse(CatalogStore.exists_canonical_name('20240315_X'))

    def test_delete(self):
        record = CatalogStore.upsert(build_record())
        self.assertTrue(CatalogStore.delete(record.pk))
        self.assertFalse(CatalogStore.delete(record.pk))
        self.assertIsNone(CatalogStore.get_by_id(record.pk))

    def test_load_all_newest_first(self):
        older = CatalogStore.upsert(build_record(suffix='OLD00000'), now=BASE_TIME)
        newer = CatalogStore.upsert(build_record(suffix='NEW00000'), now=BASE_TIME + timedelta(days=1))
        self.assertEqual([r.pk for r in CatalogStore.load_all()], [newer.pk, older.pk])

    # ===================
    # Statistics Tests
    # ===================

    def test_statistics_empty_catalog(self):
        stats = CatalogStore.get_statistics()
        self.assertEqual(stats['total_items'], 0)
        self.assertEqual(stats['total_images'], 0)
        self.assertEqual(stats['by_status'], {})

    def test_statistics_counts(self):
        CatalogStore.upsert(build_record(suffix='AAAAAAAA'))
        CatalogStore.upsert(build_record(
            suffix='BBBBBBBB', status='Catalogado', stage='01_CATALOGADO',
            livestock_nucleus='', agro_nucleus='Silagem',
        ))
        CatalogStore.upsert(build_record(
            suffix='CCCCCCCC', kind=MediaAsset.KIND_VIDEO, extension='mp4',
            area='Santa Maria', main_theme='Legado',
        ))

        stats = CatalogStore.get_statistics()

        self.assertEqual(stats['total_items'], 3)
        self.assertEqual(stats['total_images'], 2)
        self.assertEqual(stats['total_videos'], 1)
        self.assertEqual(stats['total_others'], 0)
        self.assertEqual(stats['by_status'], {'Catalogado': 1, 'Entrada (Bruto)': 2})
        self.assertEqual(stats['by_area'], {'Santa Maria': 1, 'Vila Canabrava': 2})
        self.assertEqual(stats['by_theme'], {'Legado': 1, 'Terra e Sertão': 2})
        self.assertEqual(stats['by_nucleus'], {'Cria': 2, 'Silagem': 1})

    def test_folder_counts(self):
        CatalogStore.upsert(build_record(suffix='AAAAAAAA'))
        CatalogStore.upsert(build_record(suffix='BBBBBBBB', stage='05_PUBLICADO'))
        CatalogStore.upsert(build_record(suffix='CCCCCCCC', stage='05_PUBLICADO'))

        folders = {folder['slug']: folder['count'] for folder in CatalogStore.folder_counts()}

        self.assertEqual(len(folders), 7)
        self.assertEqual(folders['00_ENTRADA'], 1)
        self.assertEqual(folders['05_PUBLICADO'], 2)
        self.assertEqual(folders['06_ARQUIVADO'], 0)


class CatalogCommandTests(TestCase):
    """Tests for the export_catalog and import_catalog commands."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write_json(self, name, payload):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w', encoding='utf-8') as fh:
            json.dump(payload, fh, ensure_ascii=False)
        return path

    def test_export_to_stdout_uses_camel_case(self):
        CatalogStore.upsert(build_record(capture_date=date(2024, 3, 15)))
        out = StringIO()

        call_command('export_catalog', stdout=out)

        documents = json.loads(out.getvalue())
        self.assertEqual(len(documents), 1)
        document = documents[0]
        self.assertEqual(document['mainTheme'], 'Terra e Sertão')
        self.assertEqual(document['captureDate'], '2024-03-15')
        self.assertIn('statusHistory', document)
        self.assertNotIn('main_theme', document)

    def test_export_import_round_trip(self):
        first = CatalogStore.upsert(build_record(suffix='AAAAAAAA', capture_date=date(2024, 3, 15)))
        StatusWorkflowService.transition(first, 'Catalogado', 'bruno', 'ok')
        CatalogStore.upsert(first)
        second = CatalogStore.upsert(build_record(suffix='BBBBBBBB', chapter='Capítulo 05'))

        path = os.path.join(self.tmp.name, 'catalog.json')
        call_command('export_catalog', output=path, stdout=StringIO())

        before = {r.pk: r for r in MediaAsset.objects.all()}
        MediaAsset.objects.all().delete()

        call_command('import_catalog', path, stdout=StringIO())

        self.assertEqual(MediaAsset.objects.count(), 2)
        for pk, original in before.items():
            restored = MediaAsset.objects.get(pk=pk)
            for field in MediaAsset._meta.concrete_fields:
                with self.subTest(pk=pk, field=field.name):
                    self.assertEqual(getattr(restored, field.attname), getattr(original, field.attname))
        self.assertEqual(MediaAsset.objects.get(pk=second.pk).chapter, 'Capítulo 05')

    def test_import_updates_existing_record(self):
        record = CatalogStore.upsert(build_record())
        out = StringIO()
        call_command('export_catalog', stdout=out)
        documents = json.loads(out.getvalue())
        documents[0]['area'] = 'Santa Maria'
        path = self._write_json('edited.json', documents)

        call_command('import_catalog', path, stdout=StringIO())

        self.assertEqual(MediaAsset.objects.count(), 1)
        self.assertEqual(MediaAsset.objects.get(pk=record.pk).area, 'Santa Maria')

    def test_import_replace_deletes_existing(self):
        CatalogStore.upsert(build_record(suffix='AAAAAAAA'))
        path = self._write_json('empty.json', [])

        call_command('import_catalog', path, '--replace', stdout=StringIO())

        self.assertEqual(MediaAsset.objects.count(), 0)

    def test_import_legacy_record(self):
        legacy = [{
            'id': '2024_03_15_VILACAN_jpg',
            'fileName': '20240315_VILACAN_CRIA_TERRAESERT_CAT_A1B2C3D4.jpg',
            'filePath': '01_CATALOGADO/2024/03/15/20240315_VILACAN_CRIA_TERRAESERT_CAT_A1B2C3D4.jpg',
            'size': 2048,
            'contentType': 'image/jpeg',
            'uploadedAt': '2024-03-15T10:00:00.000Z',
            'url': 'https://f005.backblazeb2.com/file/bucket/x.jpg',
            'area': 'Vila Canabrava',
            'nucleo': 'Cria',
            'tema': 'Terra e Sertão',
            'status': 'Catalogado',
            'ponto': None,
            'tipoProjeto': None,
            'funcaoHistorica': None,
            'evento': 'Leilão',
            'ano': '2024',
            'mes': '03',
            'dia': '15',
            'uuid': 'A1B2C3D4',
            'extensao': '',
        }]
        path = self._write_json('metadata.json', legacy)

        call_command('import_catalog', path, stdout=StringIO())

        record = MediaAsset.objects.get(pk='2024_03_15_VILACAN_jpg')
        self.assertEqual(record.canonical_name, '20240315_VILACAN_CRIA_TERRAESERT_CAT_A1B2C3D4')
        self.assertEqual(record.main_theme, 'Terra e Sertão')
        self.assertEqual(record.livestock_nucleus, 'Cria')
        self.assertEqual(record.event, 'Leilão')
        self.assertEqual(record.extension, 'jpg')
        self.assertEqual(record.kind, MediaAsset.KIND_IMAGE)
        self.assertEqual(record.capture_date, date(2024, 3, 15))
        self.assertEqual(record.created_at, datetime(2024, 3, 15, 10, 0, tzinfo=dt_timezone.utc))
        self.assertEqual(len(record.status_history), 1)
        self.assertEqual(record.status_history[0]['status'], 'Catalogado')

    def test_import_legacy_nucleus_routed_by_taxonomy(self):
        cases = [
            ('Agricultura', 'agro_nucleus'),
            ('Infraestrutura', 'operation'),
            ('Posicionamento', 'brand'),
            ('Reprodução', 'livestock_nucleus'),
            ('Nucleo Desconhecido', 'livestock_nucleus'),
        ]
        legacy = [
            {
                'id': f'legacy_{index}',
                'fileName': f'20240315_VILACAN_GERAL_TERRAESERT_ENT_0000000{index}.jpg',
                'filePath': f'00_ENTRADA/2024/03/15/20240315_VILACAN_GERAL_TERRAESERT_ENT_0000000{index}.jpg',
                'nucleo': nucleus,
            }
            for index, (nucleus, _) in enumerate(cases)
        ]
        path = self._write_json('nuclei.json', legacy)

        call_command('import_catalog', path, stdout=StringIO())

        nucleus_fields = ('livestock_nucleus', 'agro_nucleus', 'operation', 'brand')
        for index, (nucleus, expected_field) in enumerate(cases):
            record = MediaAsset.objects.get(pk=f'legacy_{index}')
            with self.subTest(nucleus=nucleus):
                for field in nucleus_fields:
                    expected = nucleus if field == expected_field else ''
                    self.assertEqual(getattr(record, field), expected)

    def test_import_invalid_record_rolls_back(self):
        documents = [
            {'canonicalName': 'A', 'fileName': 'A.jpg', 'filePath': '00_ENTRADA/2024/01/01/A.jpg'},
            {'canonicalName': 'B', 'fileName': 'B.jpg', 'filePath': '00_ENTRADA/2024/01/01/B.jpg', 'size': 'big'},
        ]
        path = self._write_json('broken.json', documents)

        with self.assertRaises(CommandError):
            call_command('import_catalog', path, stdout=StringIO())

        self.assertEqual(MediaAsset.objects.count(), 0)

    def test_import_rejects_non_array(self):
        path = self._write_json('object.json', {'items': []})
        with self.assertRaises(CommandError):
            call_command('import_catalog', path, stdout=StringIO())

    def test_import_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('import_catalog', os.path.join(self.tmp.name, 'missing.json'), stdout=StringIO())
