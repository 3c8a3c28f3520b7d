"""
API Tests for the Catalog Endpoints
===================================
Tests cover:
- Health check
- Presigned upload preparation and upload completion
- Storage connection test
- Media listing, filtering, retrieval, editing, status changes, history, delete
- Statistics and stage folders
- Taxonomy
- Request logging middleware
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone
from unittest import mock

from rest_framework import status
from rest_framework.test import APITestCase
from django.test import SimpleTestCase

from contracts.models import MediaAsset
from catalog.exceptions import StaleRecordError
from catalog.middleware import RequestLoggingMiddleware
from catalog.services import CatalogStore, StatusWorkflowService
from catalog.tests_storage import FakeB2, make_client


BASE_TIME = datetime(2024, 3, 15, 12, 0, tzinfo=dt_timezone.utc)

UPLOAD_METADATA = {
    'capture_date': '2024-03-15',
    'area': 'Vila Canabrava',
    'livestock_nucleus': 'Cria',
    'main_theme': 'Terra e Sertão',
    'status': 'Catalogado',
}


def create_record(suffix, status_name='Entrada (Bruto)', created_at=BASE_TIME, **overrides):
    canonical_name = f'20240315_VILACAN_CRIA_TERRAESERT_ENT_{suffix}'
    fields = {
        'canonical_name': canonical_name,
        'file_name': f'{canonical_name}.jpg',
        'file_path': f'00_ENTRADA/2024/03/15/{canonical_name}.jpg',
        'original_filename': f'IMG_{suffix}.JPG',
        'extension': 'jpg',
        'kind': MediaAsset.KIND_IMAGE,
        'capture_date': date(2024, 3, 15),
        'area': 'Vila Canabrava',
        'livestock_nucleus': 'Cria',
        'main_theme': 'Terra e Sertão',
    }
    fields.update(overrides)
    record = MediaAsset(**fields)
    StatusWorkflowService.record_initial_status(record, status_name, 'ana', now=lambda: created_at)
    return CatalogStore.upsert(record, now=created_at)


class HealthAPITests(APITestCase):

    def test_health(self):
        response = self.client.get('/api/health/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')
        self.assertEqual(response.data['version'], '2.0.0')
        self.assertIn('timestamp', response.data)


class UploadAPITests(APITestCase):
    """Tests for the presigned upload flow."""

    def setUp(self):
        self.b2 = FakeB2()
        self.storage = make_client(self.b2)
        patcher = mock.patch('catalog.upload_views.get_storage_client', return_value=self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _presign(self, **overrides):
        payload = {
            'filename': 'IMG_0001.JPG',
            'content_type': 'image/jpeg',
            'size': 1024,
            'metadata': dict(UPLOAD_METADATA),
        }
        payload.update(overrides)
        return self.client.post('/api/upload/presigned/', payload, format='json')

    # ===================
    # Presign Tests
    # ===================

    def test_presign_returns_upload_target_and_identity(self):
        response = self._presign()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['authorization_token'], 'upload-token')
        self.assertTrue(data['upload_url'].startswith('https://pod-000.backblaze.com/'))
        self.assertRegex(data['canonical_name'], r'^20240315_VILACAN_CRIA_TERRAESERT_CAT_[0-9A-F]{8}$')
        self.assertEqual(data['file_name'], f"{data['canonical_name']}.jpg")
        self.assertEqual(data['folder_path'], '01_CATALOGADO/2024/03/15')
        self.assertEqual(data['file_path'], f"01_CATALOGADO/2024/03/15/{data['file_name']}")
        self.assertEqual(data['headers']['Content-Type'], 'image/jpeg')

    def test_presign_names_are_unique(self):
        first = self._presign().data['canonical_name']
        second = self._presign().data['canonical_name']
        self.assertNotEqual(first, second)

    def test_presign_accepts_status_code(self):
        metadata = dict(UPLOAD_METADATA, status='PUB')
        response = self._presign(metadata=metadata)
        self.assertTrue(response.data['file_path'].startswith('05_PUBLICADO/'))

    def test_presign_without_status_goes_to_intake(self):
        metadata = dict(UPLOAD_METADATA)
        del metadata['status']
        response = self._presign(metadata=metadata)
        self.assertTrue(response.data['file_path'].startswith('00_ENTRADA/'))
        self.assertIn('_ENT_', response.data['canonical_name'])

    def test_presign_missing_filename_returns_400(self):
        response = self.client.post(
            '/api/upload/presigned/', {'metadata': dict(UPLOAD_METADATA)}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_presign_missing_area_returns_400(self):
        metadata = dict(UPLOAD_METADATA, area='')
        response = self._presign(metadata=metadata)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_presign_missing_theme_returns_400(self):
        metadata = dict(UPLOAD_METADATA)
        del metadata['main_theme']
        response = self._presign(metadata=metadata)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_presign_unknown_status_returns_400(self):
        metadata = dict(UPLOAD_METADATA, status='Rascunho')
        response = self._presign(metadata=metadata)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_presign_provider_failure_returns_502(self):
        self.b2.upload_url_status = 500
        response = self._presign()
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('error', response.data)

    def test_presign_does_not_create_record(self):
        self._presign()
        self.assertEqual(MediaAsset.objects.count(), 0)

    # ===================
    # Complete Tests
    # ===================

    def _complete(self, file_path, **overrides):
        payload = {
            'file_path': file_path,
            'metadata': dict(UPLOAD_METADATA),
            'original_filename': 'IMG_0001.JPG',
            'size': 1024,
            'content_type': 'image/jpeg',
            'actor': 'ana',
        }
        payload.update(overrides)
        return self.client.post('/api/upload/complete/', payload, format='json')

    def test_complete_creates_record(self):
        presigned = self._presign().data

        response = self._complete(presigned['file_path'])

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data
        self.assertEqual(data['canonical_name'], presigned['canonical_name'])
        self.assertEqual(data['file_name'], presigned['file_name'])
        self.assertEqual(data['file_path'], presigned['file_path'])
        self.assertEqual(data['folder_stage'], '01_CATALOGADO')
        self.assertEqual(data['status'], 'Catalogado')
        self.assertEqual(data['kind'], 'image')
        self.assertEqual(data['extension'], 'jpg')
        self.assertEqual(data['size'], 1024)
        self.assertEqual(data['capture_date'], '2024-03-15')
        self.assertEqual(data['uploaded_by'], 'ana')
        self.assertEqual(data['revision'], 1)
        self.assertEqual(
            data['url'],
            f"https://f005.backblazeb2.com/file/rc-acervo/{presigned['file_path']}",
        )
        self.assertEqual(len(data['status_history']), 1)
        self.assertEqual(data['status_history'][0]['status'], 'Catalogado')
        self.assertEqual(data['status_history'][0]['actor'], 'ana')

    def test_complete_without_status_uses_initial_status(self):
        metadata = dict(UPLOAD_METADATA)
        del metadata['status']
        response = self._complete('00_ENTRADA/2024/03/15/20240315_VILACAN_CRIA_TERRAESERT_ENT_AAAA0000.jpg',
                                  metadata=metadata)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Entrada (Bruto)')

    def test_complete_twice_returns_409(self):
        file_path = self._presign().data['file_path']

        self._complete(file_path)
        response = self._complete(file_path)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(MediaAsset.objects.count(), 1)

    def test_complete_collision_check_locks_rows(self):
        presigned = self._presign().data
        self._complete(presigned['file_path'])

        with mock.patch.object(CatalogStore, 'exists_canonical_name', return_value=True) as exists:
            response = self._complete(presigned['file_path'])

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        exists.assert_called_once_with(presigned['canonical_name'], lock=True)
        self.assertEqual(MediaAsset.objects.count(), 1)

    def test_complete_unparseable_capture_date_stored_as_null(self):
        metadata = dict(UPLOAD_METADATA, capture_date='ontem')

        response = self._complete(
            '01_CATALOGADO/2024/03/15/20240315_VILACAN_CRIA_TERRAESERT_CAT_CCCC0000.jpg',
            metadata=metadata,
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['capture_date'])
        record = MediaAsset.objects.get(canonical_name='20240315_VILACAN_CRIA_TERRAESERT_CAT_CCCC0000')
        self.assertIsNone(record.capture_date)

    def test_complete_missing_file_path_returns_400(self):
        response = self.client.post('/api/upload/complete/', {'metadata': {}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_complete_video(self):
        response = self._complete(
            '00_ENTRADA/2024/03/15/20240315_VILACAN_CRIA_TERRAESERT_ENT_BBBB0000.mp4',
            content_type='video/mp4',
            duration_sec=12.5,
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['kind'], 'video')
        self.assertEqual(response.data['duration_sec'], 12.5)

    # ===================
    # Connection Test
    # ===================

    def test_storage_connection_ok(self):
        response = self.client.get('/api/upload/test/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['api_url'], 'https://api001.backblazeb2.com')
        self.assertEqual(response.data['bucket'], 'rc-acervo')

    def test_storage_connection_failure_returns_502(self):
        self.b2.authorize_status = 401
        response = self.client.get('/api/upload/test/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)


class MediaAPITests(APITestCase):
    """Tests for /api/media/."""

    def setUp(self):
        self.first = create_record('AAAAAAAA', created_at=BASE_TIME)
        self.second = create_record(
            'BBBBBBBB',
            status_name='Catalogado',
            created_at=BASE_TIME + timedelta(hours=1),
            file_path='01_CATALOGADO/2024/04/01/20240315_VILACAN_CRIA_TERRAESERT_ENT_BBBBBBBB.jpg',
            area='Santa Maria',
            livestock_nucleus='',
            operation='Logística',
            main_theme='Legado',
            capture_date=date(2024, 4, 1),
        )
        self.third = create_record(
            'CCCCCCCC',
            created_at=BASE_TIME + timedelta(hours=2),
            kind=MediaAsset.KIND_VIDEO,
            extension='mp4',
            capture_date=date(2024, 5, 20),
        )

    def _ids(self, response):
        return [item['id'] for item in response.data['results']]

    # ===================
    # List Tests
    # ===================

    def test_list_is_paginated_newest_first(self):
        response = self.client.get('/api/media/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(self._ids(response), [self.third.pk, self.second.pk, self.first.pk])

    def test_list_limit(self):
        response = self.client.get('/api/media/', {'limit': 1})
        self.assertEqual(len(response.data['results']), 1)
        self.assertIsNotNone(response.data['next'])

    def test_filter_by_area(self):
        response = self.client.get('/api/media/', {'area': 'Santa Maria'})
        self.assertEqual(self._ids(response), [self.second.pk])

    def test_filter_by_nucleus_matches_any_nucleus_field(self):
        response = self.client.get('/api/media/', {'nucleus': 'Logística'})
        self.assertEqual(self._ids(response), [self.second.pk])

        response = self.client.get('/api/media/', {'nucleus': 'Cria'})
        self.assertEqual(set(self._ids(response)), {self.first.pk, self.third.pk})

    def test_filter_by_theme(self):
        response = self.client.get('/api/media/', {'theme': 'Legado'})
        self.assertEqual(self._ids(response), [self.second.pk])

    def test_filter_by_status(self):
        response = self.client.get('/api/media/', {'status': 'Catalogado'})
        self.assertEqual(self._ids(response), [self.second.pk])

    def test_filter_by_kind(self):
        response = self.client.get('/api/media/', {'kind': 'video'})
        self.assertEqual(self._ids(response), [self.third.pk])

    def test_search_is_case_insensitive(self):
        response = self.client.get('/api/media/', {'search': 'cccccccc'})
        self.assertEqual(self._ids(response), [self.third.pk])

        response = self.client.get('/api/media/', {'search': 'santa'})
        self.assertEqual(self._ids(response), [self.second.pk])

    def test_filters_combine_with_and(self):
        response = self.client.get('/api/media/', {'area': 'Vila Canabrava', 'kind': 'image'})
        self.assertEqual(self._ids(response), [self.first.pk])

    def test_capture_date_range(self):
        response = self.client.get('/api/media/', {'date_from': '2024-04-01', 'date_to': '2024-04-30'})
        self.assertEqual(self._ids(response), [self.second.pk])

    def test_ordering(self):
        response = self.client.get('/api/media/', {'ordering': 'capture_date'})
        self.assertEqual(self._ids(response), [self.first.pk, self.second.pk, self.third.pk])

    # ===================
    # Retrieve Tests
    # ===================

    def test_retrieve(self):
        response = self.client.get(f'/api/media/{self.first.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['canonical_name'], self.first.canonical_name)
        self.assertEqual(response.data['primary_nucleus'], 'Cria')
        self.assertEqual(response.data['folder_stage'], '00_ENTRADA')

    def test_retrieve_missing_returns_404(self):
        response = self.client.get('/api/media/missing/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # ===================
    # Edit Tests
    # ===================

    def test_patch_metadata_without_status(self):
        response = self.client.patch(
            f'/api/media/{self.first.pk}/',
            {'area': 'Jequitaí', 'chapter': 'Capítulo 05'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['area'], 'Jequitaí')
        self.assertEqual(response.data['chapter'], 'Capítulo 05')
        self.assertEqual(len(response.data['status_history']), 1)
        self.assertEqual(response.data['revision'], 2)

    def test_patch_status_appends_history(self):
        response = self.client.patch(
            f'/api/media/{self.first.pk}/',
            {'status': 'Em produção', 'actor': 'bruno', 'note': 'roteiro'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Em produção')
        history = response.data['status_history']
        self.assertEqual(len(history), 2)
        self.assertEqual(history[-1]['status'], 'Em produção')
        self.assertEqual(history[-1]['actor'], 'bruno')
        self.assertEqual(history[-1]['note'], 'roteiro')

    def test_patch_does_not_move_identity(self):
        original = MediaAsset.objects.get(pk=self.first.pk)

        response = self.client.patch(
            f'/api/media/{self.first.pk}/',
            {'status': 'Publicado', 'file_path': 'elsewhere.jpg', 'canonical_name': 'X'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['file_path'], original.file_path)
        self.assertEqual(response.data['canonical_name'], original.canonical_name)

    def test_patch_unknown_status_returns_400(self):
        response = self.client.patch(f'/api/media/{self.first.pk}/', {'status': 'Rascunho'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_missing_returns_404(self):
        response = self.client.patch('/api/media/missing/', {'area': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_stale_returns_409(self):
        with mock.patch('catalog.views.CatalogStore.upsert', side_effect=StaleRecordError('stale')):
            response = self.client.patch(f'/api/media/{self.first.pk}/', {'area': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    # ===================
    # Status and History Tests
    # ===================

    def test_status_transition(self):
        response = self.client.post(
            f'/api/media/{self.first.pk}/status/',
            {'status': 'PUB', 'actor': 'carla', 'note': 'no ar'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Publicado')
        self.assertEqual(response.data['status_history'][-1]['actor'], 'carla')
        self.assertEqual(MediaAsset.objects.get(pk=self.first.pk).status, 'Publicado')

    def test_status_transition_to_same_status_is_recorded(self):
        self.client.post(f'/api/media/{self.first.pk}/status/', {'status': 'Entrada (Bruto)'}, format='json')
        record = MediaAsset.objects.get(pk=self.first.pk)
        self.assertEqual(len(record.status_history), 2)

    def test_status_transition_requires_status(self):
        response = self.client.post(f'/api/media/{self.first.pk}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history(self):
        self.client.post(f'/api/media/{self.first.pk}/status/', {'status': 'Catalogado'}, format='json')
        self.client.post(f'/api/media/{self.first.pk}/status/', {'status': 'Em produção'}, format='json')

        response = self.client.get(f'/api/media/{self.first.pk}/history/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(
            [entry['status'] for entry in response.data['results']],
            ['Entrada (Bruto)', 'Catalogado', 'Em produção'],
        )

    # ===================
    # Delete Tests
    # ===================

    def test_delete(self):
        response = self.client.delete(f'/api/media/{self.first.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(MediaAsset.objects.filter(pk=self.first.pk).exists())

    def test_delete_missing_returns_404(self):
        response = self.client.delete('/api/media/missing/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # ===================
    # Stats and Folders Tests
    # ===================

    def test_stats(self):
        response = self.client.get('/api/media/stats/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_items'], 3)
        self.assertEqual(response.data['total_images'], 2)
        self.assertEqual(response.data['total_videos'], 1)
        self.assertEqual(response.data['by_status']['Entrada (Bruto)'], 2)
        self.assertEqual(response.data['by_nucleus'], {'Cria': 2, 'Logística': 1})

    def test_folders(self):
        response = self.client.get('/api/folders/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 7)
        counts = {folder['slug']: folder['count'] for folder in response.data['results']}
        self.assertEqual(counts['00_ENTRADA'], 2)
        self.assertEqual(counts['01_CATALOGADO'], 1)
        self.assertEqual(counts['02_PRODUCAO'], 0)


class TaxonomyAPITests(APITestCase):

    def test_full_taxonomy(self):
        response = self.client.get('/api/taxonomy/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for section in ['areas', 'statuses', 'livestock-nuclei', 'main-themes', 'chapters']:
            self.assertIn(section, response.data)

    def test_section(self):
        response = self.client.get('/api/taxonomy/statuses/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 9)
        self.assertEqual(response.data[0]['id'], 'ENT')

    def test_unknown_section_returns_404(self):
        response = self.client.get('/api/taxonomy/planets/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_sub_items(self):
        response = self.client.get('/api/taxonomy/livestock-nuclei/Cria/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Desmama', response.data['results'])

    def test_sub_items_unknown_parent_is_empty(self):
        response = self.client.get('/api/taxonomy/livestock-nuclei/Nada/')
        self.assertEqual(response.data['results'], [])


class RequestLoggingMiddlewareTests(SimpleTestCase):

    def setUp(self):
        self.middleware = RequestLoggingMiddleware(get_response=lambda request: None)

    def test_should_log_api_endpoints(self):
        self.assertTrue(self.middleware.should_log('/api/media/'))

    def test_should_not_log_static_or_health(self):
        self.assertFalse(self.middleware.should_log('/static/app.js'))
        self.assertFalse(self.middleware.should_log('/api/health/'))
