"""
Unit Tests for Identity & Naming
================================
Tests cover:
- Slug normalization and fallback
- Folder stage derivation from status
- Capture date resolution and parsing
- Canonical name composition
- Storage path composition
- Taxonomy lookups used by naming
- One capture date for the name and path of a prepared upload
"""

import itertools
from datetime import date, datetime, timezone as dt_timezone
from unittest import mock

from django.test import SimpleTestCase, override_settings

from catalog import taxonomy
from catalog.services import NamingService, UploadService
from catalog.services.naming import FOLDER_STAGES
from catalog.tests_storage import FakeB2, make_client


FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc)
TOKEN = 'a1b2c3d4-e5f6-4789-abcd-0123456789ab'


class SlugifyTests(SimpleTestCase):
    """Tests for NamingService.slugify."""

    def test_removes_accents_and_spaces(self):
        self.assertEqual(NamingService.slugify('São João'), 'SAOJOAO')

    def test_strips_punctuation(self):
        self.assertEqual(NamingService.slugify("Olhos d'Água"), 'OLHOSDAGUA')

    def test_truncates_to_max_length(self):
        self.assertEqual(NamingService.slugify('Terra e Sertão', 10), 'TERRAESERT')

    def test_default_max_length_is_fifteen(self):
        slug = NamingService.slugify('Genética e Melhoramento')
        self.assertEqual(slug, 'GENETICAEMELHOR')
        self.assertEqual(len(slug), 15)

    def test_empty_input_falls_back(self):
        self.assertEqual(NamingService.slugify(''), 'GERAL')
        self.assertEqual(NamingService.slugify(None), 'GERAL')

    def test_only_symbols_falls_back(self):
        self.assertEqual(NamingService.slugify('!!! ---'), 'GERAL')

    def test_fallback_respects_max_length(self):
        self.assertEqual(NamingService.slugify('', 3), 'GER')

    def test_output_is_upper_alphanumeric(self):
        slug = NamingService.slugify('Ração proteica & balanceamento 2024')
        self.assertRegex(slug, r'^[A-Z0-9]+$')

    def test_is_idempotent(self):
        """Slugifying a slug returns the same slug."""
        for text in ['Vila Canabrava', '', None, 'Fé e Espiritualidade', '!!', 'abc123']:
            with self.subTest(text=text):
                once = NamingService.slugify(text)
                self.assertEqual(NamingService.slugify(once), once)


class FolderStageTests(SimpleTestCase):
    """Tests for NamingService.derive_folder_stage."""

    def test_every_status_maps_to_a_stage(self):
        expected = {
            'Entrada (Bruto)': '00_ENTRADA',
            'Em triagem': '00_ENTRADA',
            'Catalogado': '01_CATALOGADO',
            'Selecionado para produção': '01_CATALOGADO',
            'Em produção': '02_PRODUCAO',
            'Em aprovação': '03_APROVACAO',
            'Aprovado': '04_APROVADO',
            'Publicado': '05_PUBLICADO',
            'Arquivado': '06_ARQUIVADO',
        }
        self.assertEqual(set(expected), set(taxonomy.STATUS_NAMES))
        for status, folder in expected.items():
            with self.subTest(status=status):
                self.assertEqual(NamingService.derive_folder_stage(status), folder)

    def test_accepts_status_code(self):
        self.assertEqual(NamingService.derive_folder_stage('PUB'), '05_PUBLICADO')

    def test_case_and_accent_insensitive(self):
        self.assertEqual(NamingService.derive_folder_stage('em producao'), '02_PRODUCAO')

    def test_unknown_status_goes_to_intake(self):
        self.assertEqual(NamingService.derive_folder_stage('Lixeira'), '00_ENTRADA')
        self.assertEqual(NamingService.derive_folder_stage(None), '00_ENTRADA')
        self.assertEqual(NamingService.derive_folder_stage(''), '00_ENTRADA')

    def test_stage_folders_in_workflow_order(self):
        slugs = [stage['slug'] for stage in FOLDER_STAGES]
        self.assertEqual(slugs, sorted(slugs))
        self.assertEqual(len(slugs), 7)


class CaptureDateTests(SimpleTestCase):
    """Tests for NamingService.resolve_capture_date."""

    def test_iso_date_string(self):
        result = NamingService.resolve_capture_date({'capture_date': '2024-03-15'})
        self.assertEqual(result, date(2024, 3, 15))

    def test_iso_datetime_string(self):
        result = NamingService.resolve_capture_date({'capture_date': '2024-03-15T08:30:00'})
        self.assertEqual(result, date(2024, 3, 15))

    def test_date_object(self):
        result = NamingService.resolve_capture_date({'capture_date': date(2023, 1, 2)})
        self.assertEqual(result, date(2023, 1, 2))

    def test_missing_uses_now(self):
        result = NamingService.resolve_capture_date({}, now=FIXED_NOW)
        self.assertEqual(result, date(2024, 6, 1))

    def test_unparseable_uses_now(self):
        result = NamingService.resolve_capture_date({'capture_date': 'ontem'}, now=FIXED_NOW)
        self.assertEqual(result, date(2024, 6, 1))

    def test_invalid_calendar_date_uses_now(self):
        result = NamingService.resolve_capture_date({'capture_date': '2024-02-31'}, now=FIXED_NOW)
        self.assertEqual(result, date(2024, 6, 1))

    def test_parse_returns_none_for_unparseable(self):
        self.assertIsNone(NamingService.parse_capture_date('ontem'))
        self.assertIsNone(NamingService.parse_capture_date('2024-02-31'))
        self.assertIsNone(NamingService.parse_capture_date(''))
        self.assertIsNone(NamingService.parse_capture_date(None))

    def test_parse_accepts_iso_strings(self):
        self.assertEqual(NamingService.parse_capture_date('2024-03-15T08:30:00'), date(2024, 3, 15))
        self.assertEqual(NamingService.parse_capture_date(' 2024-03-15 '), date(2024, 3, 15))


class CanonicalNameTests(SimpleTestCase):
    """Tests for NamingService.build_canonical_name."""

    def _metadata(self, **overrides):
        metadata = {
            'capture_date': '2024-03-15',
            'area': 'Vila Canabrava',
            'livestock_nucleus': 'Cria',
            'main_theme': 'Terra e Sertão',
            'status': 'Catalogado',
        }
        metadata.update(overrides)
        return metadata

    def test_full_metadata(self):
        name = NamingService.build_canonical_name(self._metadata(), TOKEN)
        self.assertEqual(name, '20240315_VILACAN_CRIA_TERRAESERT_CAT_A1B2C3D4')

    def test_has_six_segments(self):
        name = NamingService.build_canonical_name(self._metadata(), TOKEN)
        self.assertEqual(len(name.split('_')), 6)

    def test_empty_metadata_uses_fallbacks(self):
        name = NamingService.build_canonical_name({}, TOKEN, now=FIXED_NOW)
        self.assertEqual(name, '20240601_GERAL_GERAL_GERAL_ENT_A1B2C3D4')

    def test_none_metadata_uses_fallbacks(self):
        name = NamingService.build_canonical_name(None, TOKEN, now=FIXED_NOW)
        self.assertEqual(name, '20240601_GERAL_GERAL_GERAL_ENT_A1B2C3D4')

    def test_unknown_area_is_slugified(self):
        name = NamingService.build_canonical_name(self._metadata(area='Fazenda Nova Esperança'), TOKEN)
        self.assertEqual(name.split('_')[1], 'FAZENDAN')

    def test_nucleus_priority_order(self):
        """Livestock wins over agro, agro over operations, operations over brand."""
        metadata = self._metadata(
            livestock_nucleus='',
            agro_nucleus='Silagem',
            operation='Logística',
            brand='Marca RC',
        )
        self.assertEqual(NamingService.build_canonical_name(metadata, TOKEN).split('_')[2], 'SILAGEM')

        metadata['agro_nucleus'] = ''
        self.assertEqual(NamingService.build_canonical_name(metadata, TOKEN).split('_')[2], 'LOGISTIC')

        metadata['operation'] = ''
        self.assertEqual(NamingService.build_canonical_name(metadata, TOKEN).split('_')[2], 'MARCARC')

    def test_status_code_from_name(self):
        name = NamingService.build_canonical_name(self._metadata(status='Em aprovação'), TOKEN)
        self.assertEqual(name.split('_')[4], 'APR')

    def test_unknown_status_code_defaults_to_intake(self):
        name = NamingService.build_canonical_name(self._metadata(status='Rascunho'), TOKEN)
        self.assertEqual(name.split('_')[4], 'ENT')

    def test_token_is_first_eight_upper_case(self):
        name = NamingService.build_canonical_name(self._metadata(), 'abcdef0123456789')
        self.assertTrue(name.endswith('_ABCDEF01'))

    def test_deterministic(self):
        first = NamingService.build_canonical_name(self._metadata(), TOKEN)
        second = NamingService.build_canonical_name(self._metadata(), TOKEN)
        self.assertEqual(first, second)

    def test_different_tokens_give_different_names(self):
        first = NamingService.build_canonical_name(self._metadata(), 'aaaaaaaa1111')
        second = NamingService.build_canonical_name(self._metadata(), 'bbbbbbbb2222')
        self.assertNotEqual(first, second)


class StoragePathTests(SimpleTestCase):
    """Tests for NamingService.build_storage_path."""

    def test_stage_and_date_partition(self):
        metadata = {'capture_date': '2024-03-15', 'status': 'Catalogado'}
        path = NamingService.build_storage_path(metadata, 'NAME', 'jpg')
        self.assertEqual(path, '01_CATALOGADO/2024/03/15/NAME.jpg')

    def test_extension_is_lowered_and_dot_stripped(self):
        metadata = {'capture_date': '2024-12-01', 'status': 'Publicado'}
        path = NamingService.build_storage_path(metadata, 'NAME', '.MP4')
        self.assertEqual(path, '05_PUBLICADO/2024/12/01/NAME.mp4')

    def test_missing_extension_defaults_to_jpg(self):
        path = NamingService.build_storage_path({'capture_date': '2024-03-15'}, 'NAME', '')
        self.assertEqual(path, '00_ENTRADA/2024/03/15/NAME.jpg')

    def test_missing_date_uses_now(self):
        path = NamingService.build_storage_path({}, 'NAME', 'png', now=FIXED_NOW)
        self.assertEqual(path, '00_ENTRADA/2024/06/01/NAME.png')

    def test_path_matches_canonical_name_date(self):
        metadata = {'capture_date': '2023-07-09', 'area': 'Santa Maria', 'main_theme': 'Legado'}
        name = NamingService.build_canonical_name(metadata, TOKEN)
        path = NamingService.build_storage_path(metadata, name, 'jpg')
        self.assertTrue(path.startswith('00_ENTRADA/2023/07/09/20230709_SANTAMA_'))

    def test_extension_from_filename(self):
        self.assertEqual(NamingService.extension_from_filename('IMG_0001.JPG'), 'jpg')
        self.assertEqual(NamingService.extension_from_filename('clip.final.MOV'), 'mov')
        self.assertEqual(NamingService.extension_from_filename('no_extension'), 'jpg')

    def test_detect_kind(self):
        self.assertEqual(NamingService.detect_kind('jpg'), 'image')
        self.assertEqual(NamingService.detect_kind('MP4'), 'video')
        self.assertEqual(NamingService.detect_kind('pdf'), 'other')


class TaxonomyLookupTests(SimpleTestCase):
    """Tests for the taxonomy helpers."""

    def test_area_code_lookup(self):
        self.assertEqual(taxonomy.area_code_for('Vila Canabrava'), 'VILACAN')
        self.assertEqual(taxonomy.area_code_for('vila canabrava'), 'VILACAN')
        self.assertIsNone(taxonomy.area_code_for('Nowhere'))

    def test_status_name_for_code_and_name(self):
        self.assertEqual(taxonomy.status_name_for('cat'), 'Catalogado')
        self.assertEqual(taxonomy.status_name_for('em aprovacao'), 'Em aprovação')
        self.assertIsNone(taxonomy.status_name_for('Rascunho'))

    def test_sub_items_of_nested_section(self):
        self.assertIn('Desmama', taxonomy.get_sub_items('livestock-nuclei', 'Cria'))
        self.assertEqual(taxonomy.get_sub_items('livestock-nuclei', 'Nada'), [])
        self.assertEqual(taxonomy.get_sub_items('areas', 'Cria'), [])

    def test_capture_point_ids_have_no_spaces(self):
        for point in taxonomy.CAPTURE_POINTS:
            self.assertNotIn(' ', point['id'])

    def test_main_themes_match_secondary_theme_keys(self):
        self.assertEqual(taxonomy.MAIN_THEMES, list(taxonomy.SECONDARY_THEMES))


class PrepareUploadDateTests(SimpleTestCase):
    """Name and path of a prepared upload share one capture date."""

    @override_settings(TIME_ZONE='America/Sao_Paulo')
    def test_clock_crossing_midnight_between_calls(self):
        # 23:59:59 in São Paulo, then 00:00:00 of the next day
        ticks = itertools.chain(
            [datetime(2024, 3, 16, 2, 59, 59, 999999, tzinfo=dt_timezone.utc)],
            itertools.repeat(datetime(2024, 3, 16, 3, 0, 0, 1, tzinfo=dt_timezone.utc)),
        )
        metadata = {'area': 'X', 'main_theme': 'Y'}

        with mock.patch('django.utils.timezone.now', side_effect=lambda: next(ticks)):
            result = UploadService.prepare_upload(make_client(FakeB2()), 'foto.jpg', 'image/jpeg', metadata)

        self.assertTrue(result['canonical_name'].startswith('20240315_'))
        self.assertTrue(result['file_path'].startswith('00_ENTRADA/2024/03/15/'))
        self.assertEqual(result['folder_path'], '00_ENTRADA/2024/03/15')
