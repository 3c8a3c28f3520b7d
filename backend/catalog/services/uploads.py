"""
Upload Service
==============
Two-step upload flow:

1. prepare_upload: compute the canonical name and storage path from the
   metadata, fetch an upload URL from the provider and hand both to the
   client, which sends the bytes directly to the provider.
2. complete_upload: once the bytes are stored, create the catalog record
   with its identity frozen and its status history seeded.
"""

import logging
import uuid

from django.db import transaction
from django.utils import timezone

from contracts.models import MediaAsset
from catalog import taxonomy
from catalog.exceptions import CanonicalNameCollision
from catalog.services.catalog_store import CatalogStore
from catalog.services.naming import NamingService
from catalog.services.workflow import StatusWorkflowService

logger = logging.getLogger(__name__)

# Classification fields copied from upload metadata onto the record
CLASSIFICATION_FIELDS = (
    'area',
    'capture_point',
    'project_type',
    'livestock_nucleus',
    'livestock_subnucleus',
    'agro_nucleus',
    'agro_subnucleus',
    'operation',
    'sub_operation',
    'brand',
    'sub_brand',
    'main_theme',
    'secondary_theme',
    'event',
    'historical_function',
    'chapter',
)


class UploadService:
    """Orchestrates naming, the storage provider and the catalog store."""

    @staticmethod
    def prepare_upload(storage_client, filename, content_type, metadata, now=None) -> dict:
        """
        Compute identity values and obtain an upload target.

        Args:
            storage_client: B2StorageClient (or compatible)
            filename: Client-side file name (only its extension is kept)
            content_type: MIME type hint for the provider
            metadata: Upload metadata mapping

        Returns:
            dict: upload_url, authorization_token, canonical_name, file_name,
                file_path, folder_path, headers

        Raises:
            StorageProviderError: if the provider cannot issue an upload URL
        """
        extension = NamingService.extension_from_filename(filename)
        unique_token = uuid.uuid4().hex
        # name and path must share one fallback capture date
        now = now or timezone.now()

        canonical_name = NamingService.build_canonical_name(metadata, unique_token, now=now)
        file_path = NamingService.build_storage_path(metadata, canonical_name, extension, now=now)
        folder_path, file_name = file_path.rsplit('/', 1)

        target = storage_client.get_upload_target()
        logger.info(f"Prepared upload of {filename!r} as {file_path}")

        return {
            'upload_url': target.upload_url,
            'authorization_token': target.authorization_token,
            'canonical_name': canonical_name,
            'file_name': file_name,
            'file_path': file_path,
            'folder_path': folder_path,
            'headers': storage_client.upload_headers(target, file_path, content_type),
        }

    @staticmethod
    def complete_upload(storage_client, file_path, metadata, file_info=None, actor=None) -> MediaAsset:
        """
        Register a stored object as a new catalog record.

        The canonical name is read back from the file path issued by
        prepare_upload; it is never recomputed.

        Args:
            storage_client: Used to build the public URL
            file_path: Object key returned by prepare_upload
            metadata: Classification metadata (same as at preparation)
            file_info: size, content_type, original_filename, duration_sec,
                width, height
            actor: Who completed the upload

        Returns:
            MediaAsset: The saved record

        Raises:
            CanonicalNameCollision: if another record already has this name
        """
        metadata = metadata or {}
        file_info = file_info or {}

        file_name = file_path.rsplit('/', 1)[-1]
        canonical_name, _, extension = file_name.rpartition('.')
        if not canonical_name:
            canonical_name, extension = file_name, ''
        extension = extension.lower()

        status = taxonomy.status_name_for(metadata.get('status')) or taxonomy.INITIAL_STATUS
        url = storage_client.public_url(file_path)

        record = MediaAsset(
            canonical_name=canonical_name,
            file_name=file_name,
            file_path=file_path,
            original_filename=file_info.get('original_filename') or '',
            url=url,
            thumbnail_url=url,
            size=file_info.get('size') or 0,
            content_type=file_info.get('content_type') or 'application/octet-stream',
            extension=extension,
            kind=NamingService.detect_kind(extension),
            duration_sec=file_info.get('duration_sec'),
            width=file_info.get('width'),
            height=file_info.get('height'),
            capture_date=NamingService.parse_capture_date(metadata.get('capture_date')),
            uploaded_by=actor or '',
            **{field: metadata.get(field) or '' for field in CLASSIFICATION_FIELDS},
        )
        StatusWorkflowService.record_initial_status(record, status, actor)

        with transaction.atomic():
            if CatalogStore.exists_canonical_name(canonical_name, lock=True):
                logger.warning(f"Canonical name collision on {canonical_name}")
                raise CanonicalNameCollision(f"A record named {canonical_name} already exists")
            return CatalogStore.upsert(record)
