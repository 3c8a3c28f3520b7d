"""
Unit Tests for the B2 Storage Client
====================================
Tests cover:
- Account authorization and its cache
- Cache expiry under a controlled clock
- Upload URL acquisition
- Provider failures surfacing as StorageProviderError
- Public URL and upload header construction
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import httpx
from django.test import SimpleTestCase, override_settings

from catalog.exceptions import StorageProviderError
from catalog.services import AuthorizationCache, B2StorageClient, get_storage_client, reset_storage_client
from catalog.services.storage import B2Authorization, UploadTarget


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self):
        self.current = datetime(2024, 3, 15, 12, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class FakeB2:
    """httpx.MockTransport handler imitating the two B2 calls we use."""

    def __init__(self, authorize_status=200, upload_url_status=200):
        self.authorize_status = authorize_status
        self.upload_url_status = upload_url_status
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if request.url.path.endswith('/b2_authorize_account'):
            if self.authorize_status != 200:
                return httpx.Response(self.authorize_status, json={'code': 'unauthorized'})
            return httpx.Response(200, json={
                'authorizationToken': 'account-token',
                'apiUrl': 'https://api001.backblazeb2.com',
                'downloadUrl': 'https://f001.backblazeb2.com',
            })
        if request.url.path.endswith('/b2_get_upload_url'):
            if self.upload_url_status != 200:
                return httpx.Response(self.upload_url_status, json={'code': 'bad_request'})
            return httpx.Response(200, json={
                'bucketId': 'bucket-id',
                'uploadUrl': 'https://pod-000.backblaze.com/b2api/v2/b2_upload_file/bucket-id',
                'authorizationToken': 'upload-token',
            })
        return httpx.Response(404)

    def count(self, suffix):
        return sum(1 for request in self.requests if request.url.path.endswith(suffix))


def make_client(handler, clock=None, **overrides):
    clock = clock or ManualClock()
    options = {
        'account_id': 'account-id',
        'application_key': 'app-key',
        'bucket_id': 'bucket-id',
        'bucket_name': 'rc-acervo',
        'api_url': 'https://api005.backblazeb2.com',
        'download_url': 'https://f005.backblazeb2.com',
        'auth_ttl': timedelta(hours=23),
        'http_client': httpx.Client(transport=httpx.MockTransport(handler)),
        'now': clock,
    }
    options.update(overrides)
    return B2StorageClient(**options)


class AuthorizationCacheTests(SimpleTestCase):
    """Tests for AuthorizationCache."""

    def setUp(self):
        self.clock = ManualClock()
        self.cache = AuthorizationCache(now=self.clock)
        self.value = B2Authorization(
            token='t', api_url='a', download_url='d',
            expires_at=self.clock() + timedelta(hours=1),
        )

    def test_empty_cache_returns_none(self):
        self.assertIsNone(self.cache.get())

    def test_returns_value_before_expiry(self):
        self.cache.store(self.value)
        self.clock.advance(minutes=59)
        self.assertEqual(self.cache.get(), self.value)

    def test_expired_value_is_not_returned(self):
        self.cache.store(self.value)
        self.clock.advance(hours=1)
        self.assertIsNone(self.cache.get())

    def test_clear(self):
        self.cache.store(self.value)
        self.cache.clear()
        self.assertIsNone(self.cache.get())


class B2StorageClientTests(SimpleTestCase):
    """Tests for B2StorageClient."""

    # ===================
    # Authorization Tests
    # ===================

    def test_authorize_sends_basic_auth(self):
        b2 = FakeB2()
        client = make_client(b2)

        auth = client.authorize()

        self.assertEqual(auth.token, 'account-token')
        self.assertEqual(auth.api_url, 'https://api001.backblazeb2.com')
        request = b2.requests[0]
        self.assertEqual(request.method, 'GET')
        self.assertEqual(str(request.url), 'https://api005.backblazeb2.com/b2api/v2/b2_authorize_account')
        self.assertTrue(request.headers['Authorization'].startswith('Basic '))

    def test_authorization_is_cached(self):
        b2 = FakeB2()
        client = make_client(b2)

        client.authorize()
        client.authorize()
        client.get_upload_target()

        self.assertEqual(b2.count('/b2_authorize_account'), 1)

    def test_authorization_refreshed_after_ttl(self):
        b2 = FakeB2()
        clock = ManualClock()
        client = make_client(b2, clock=clock)

        client.authorize()
        clock.advance(hours=22, minutes=59)
        client.authorize()
        self.assertEqual(b2.count('/b2_authorize_account'), 1)

        clock.advance(minutes=1)
        client.authorize()
        self.assertEqual(b2.count('/b2_authorize_account'), 2)

    def test_injected_cache_is_shared(self):
        b2 = FakeB2()
        clock = ManualClock()
        cache = AuthorizationCache(now=clock)

        make_client(b2, clock=clock, cache=cache).authorize()
        make_client(b2, clock=clock, cache=cache).authorize()

        self.assertEqual(b2.count('/b2_authorize_account'), 1)

    def test_unauthorized_raises(self):
        client = make_client(FakeB2(authorize_status=401))
        with self.assertRaises(StorageProviderError):
            client.authorize()

    def test_failed_authorization_is_not_cached(self):
        b2 = FakeB2(authorize_status=503)
        client = make_client(b2)

        with self.assertRaises(StorageProviderError):
            client.authorize()
        b2.authorize_status = 200
        client.authorize()

        self.assertEqual(b2.count('/b2_authorize_account'), 2)

    def test_missing_credentials_raise_without_request(self):
        b2 = FakeB2()
        client = make_client(b2, account_id='', application_key='')

        self.assertFalse(client.is_configured)
        with self.assertRaises(StorageProviderError):
            client.authorize()
        self.assertEqual(b2.requests, [])

    def test_network_error_raises(self):
        def unreachable(request):
            raise httpx.ConnectError('connection refused', request=request)

        client = make_client(unreachable)
        with self.assertRaises(StorageProviderError):
            client.authorize()

    # ===================
    # Upload URL Tests
    # ===================

    def test_get_upload_target(self):
        b2 = FakeB2()
        client = make_client(b2)

        target = client.get_upload_target()

        self.assertEqual(target.authorization_token, 'upload-token')
        self.assertTrue(target.upload_url.startswith('https://pod-000.backblaze.com/'))
        request = b2.requests[-1]
        self.assertEqual(request.method, 'POST')
        self.assertEqual(str(request.url), 'https://api001.backblazeb2.com/b2api/v2/b2_get_upload_url')
        self.assertEqual(request.headers['Authorization'], 'account-token')
        self.assertIn(b'"bucketId"', request.content)

    def test_upload_url_failure_raises(self):
        client = make_client(FakeB2(upload_url_status=400))
        with self.assertRaises(StorageProviderError):
            client.get_upload_target()

    # ===================
    # URL and Header Tests
    # ===================

    def test_public_url(self):
        client = make_client(FakeB2())
        self.assertEqual(
            client.public_url('01_CATALOGADO/2024/03/15/NAME.jpg'),
            'https://f005.backblazeb2.com/file/rc-acervo/01_CATALOGADO/2024/03/15/NAME.jpg',
        )

    def test_upload_headers_encode_file_name(self):
        target = UploadTarget(upload_url='https://upload', authorization_token='upload-token')

        headers = B2StorageClient.upload_headers(target, '01_CATALOGADO/2024/03/15/NAME.jpg', 'image/jpeg')

        self.assertEqual(headers['Authorization'], 'upload-token')
        self.assertEqual(headers['X-Bz-File-Name'], '01_CATALOGADO%2F2024%2F03%2F15%2FNAME.jpg')
        self.assertEqual(headers['Content-Type'], 'image/jpeg')
        self.assertEqual(headers['X-Bz-Content-Sha1'], 'do_not_verify')

    def test_upload_headers_default_content_type(self):
        target = UploadTarget(upload_url='https://upload', authorization_token='t')
        headers = B2StorageClient.upload_headers(target, 'a.jpg')
        self.assertEqual(headers['Content-Type'], 'application/octet-stream')


class StorageClientFactoryTests(SimpleTestCase):
    """Tests for the process-wide client."""

    def setUp(self):
        reset_storage_client()
        self.addCleanup(reset_storage_client)

    @override_settings(B2_ACCOUNT_ID='acc', B2_APPLICATION_KEY='key', B2_BUCKET_ID='bid', B2_BUCKET_NAME='rc-acervo')
    def test_built_from_settings_once(self):
        client = get_storage_client()

        self.assertIs(get_storage_client(), client)
        self.assertTrue(client.is_configured)
        self.assertEqual(client.bucket_name, 'rc-acervo')

    @override_settings(B2_ACCOUNT_ID='', B2_APPLICATION_KEY='', B2_BUCKET_ID='')
    def test_reset_rebuilds_client(self):
        first = get_storage_client()
        self.assertFalse(first.is_configured)

        reset_storage_client()

        self.assertIsNot(get_storage_client(), first)
