"""
Storage Provider Client
=======================
Thin Backblaze B2 client: account authorization, upload-URL acquisition
and public URL construction. The bytes themselves go straight from the
browser to B2 using the credentials handed out here.

The account authorization is cached in an explicit AuthorizationCache
whose clock can be injected, so expiry is deterministic under test.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
from urllib.parse import quote

import httpx
from django.conf import settings
from django.utils import timezone

from catalog.exceptions import StorageProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api005.backblazeb2.com'
DEFAULT_DOWNLOAD_URL = 'https://f005.backblazeb2.com'
DEFAULT_AUTH_TTL = timedelta(hours=23)

AUTHORIZE_PATH = '/b2api/v2/b2_authorize_account'
GET_UPLOAD_URL_PATH = '/b2api/v2/b2_get_upload_url'


@dataclass(frozen=True)
class B2Authorization:
    """Result of b2_authorize_account."""
    token: str
    api_url: str
    download_url: str
    expires_at: datetime


@dataclass(frozen=True)
class UploadTarget:
    """Endpoint and token a client uses to place bytes with B2."""
    upload_url: str
    authorization_token: str


class AuthorizationCache:
    """
    Holds one B2Authorization until it expires.

    Args:
        now: Clock callable returning an aware datetime
    """

    def __init__(self, now: Callable[[], datetime] = timezone.now):
        self._now = now
        self._value: Optional[B2Authorization] = None
        self._lock = threading.Lock()

    def get(self) -> Optional[B2Authorization]:
        """Cached authorization, or None when absent or expired."""
        with self._lock:
            if self._value is not None and self._now() < self._value.expires_at:
                return self._value
            return None

    def store(self, value: B2Authorization) -> None:
        with self._lock:
            self._value = value

    def clear(self) -> None:
        with self._lock:
            self._value = None


class B2StorageClient:
    """
    Backblaze B2 client limited to what the upload flow needs.

    Network failures and non-2xx answers surface as StorageProviderError;
    nothing is retried.
    """

    def __init__(
        self,
        account_id: str,
        application_key: str,
        bucket_id: str,
        bucket_name: str,
        api_url: str = DEFAULT_API_URL,
        download_url: str = DEFAULT_DOWNLOAD_URL,
        auth_ttl: timedelta = DEFAULT_AUTH_TTL,
        cache: Optional[AuthorizationCache] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        now: Callable[[], datetime] = timezone.now,
    ):
        self.account_id = account_id
        self.application_key = application_key
        self.bucket_id = bucket_id
        self.bucket_name = bucket_name
        self.api_url = api_url.rstrip('/')
        self.download_url = download_url.rstrip('/')
        self.auth_ttl = auth_ttl
        self._now = now
        self.cache = cache or AuthorizationCache(now=now)
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls) -> 'B2StorageClient':
        """Build a client from the B2_* Django settings."""
        return cls(
            account_id=getattr(settings, 'B2_ACCOUNT_ID', ''),
            application_key=getattr(settings, 'B2_APPLICATION_KEY', ''),
            bucket_id=getattr(settings, 'B2_BUCKET_ID', ''),
            bucket_name=getattr(settings, 'B2_BUCKET_NAME', ''),
            api_url=getattr(settings, 'B2_API_URL', DEFAULT_API_URL),
            download_url=getattr(settings, 'B2_DOWNLOAD_URL', DEFAULT_DOWNLOAD_URL),
            auth_ttl=timedelta(seconds=getattr(settings, 'B2_AUTH_TTL_SECONDS', DEFAULT_AUTH_TTL.total_seconds())),
            timeout=getattr(settings, 'B2_HTTP_TIMEOUT', 30.0),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.account_id and self.application_key and self.bucket_id)

    def _request_json(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"B2 {method} {url} failed with HTTP {e.response.status_code}: {e.response.text[:200]}")
            raise StorageProviderError(
                f"Storage provider answered HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"B2 {method} {url} failed: {e}")
            raise StorageProviderError(f"Storage provider unreachable: {e}") from e
        except ValueError as e:
            raise StorageProviderError('Storage provider returned invalid JSON') from e

    def authorize(self) -> B2Authorization:
        """
        Account authorization, from cache while it is still valid.

        Returns:
            B2Authorization with token, api_url and download_url
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        if not self.is_configured:
            raise StorageProviderError('Storage provider credentials are not configured')

        data = self._request_json(
            'GET',
            f"{self.api_url}{AUTHORIZE_PATH}",
            auth=(self.account_id, self.application_key),
        )
        try:
            authorization = B2Authorization(
                token=data['authorizationToken'],
                api_url=data['apiUrl'],
                download_url=data.get('downloadUrl', self.download_url),
                expires_at=self._now() + self.auth_ttl,
            )
        except KeyError as e:
            raise StorageProviderError(f"Authorization response missing {e}") from e

        self.cache.store(authorization)
        logger.info(f"Authorized with B2 (api {authorization.api_url})")
        return authorization

    def get_upload_target(self) -> UploadTarget:
        """Fresh upload URL and token for the configured bucket."""
        auth = self.authorize()
        data = self._request_json(
            'POST',
            f"{auth.api_url}{GET_UPLOAD_URL_PATH}",
            json={'bucketId': self.bucket_id},
            headers={'Authorization': auth.token},
        )
        try:
            return UploadTarget(
                upload_url=data['uploadUrl'],
                authorization_token=data['authorizationToken'],
            )
        except KeyError as e:
            raise StorageProviderError(f"Upload URL response missing {e}") from e

    def public_url(self, file_path: str) -> str:
        """Friendly download URL of an object in the bucket."""
        return f"{self.download_url}/file/{self.bucket_name}/{file_path}"

    @staticmethod
    def upload_headers(target: UploadTarget, file_path: str, content_type: Optional[str] = None) -> dict:
        """Headers the client must send with the upload request."""
        return {
            'Authorization': target.authorization_token,
            'X-Bz-File-Name': quote(file_path, safe=''),
            'Content-Type': content_type or 'application/octet-stream',
            'X-Bz-Content-Sha1': 'do_not_verify',
        }

    def close(self) -> None:
        self._http.close()


_client: Optional[B2StorageClient] = None
_client_lock = threading.Lock()


def get_storage_client() -> B2StorageClient:
    """Process-wide client, built from settings on first use."""
    global _client
    with _client_lock:
        if _client is None:
            _client = B2StorageClient.from_settings()
        return _client


def reset_storage_client() -> None:
    """Drop the process-wide client (settings changed, test cleanup)."""
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
        _client = None
