"""
Views for the upload flow and service health.

The browser uploads bytes directly to the storage provider: it first asks
for a presigned target, sends the file there, then confirms completion so
the catalog record is created.
"""

import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from catalog.exceptions import CanonicalNameCollision, StorageProviderError
from catalog.serializers import (
    CompleteUploadSerializer,
    MediaAssetSerializer,
    PresignRequestSerializer,
)
from catalog.services import UploadService, get_storage_client

logger = logging.getLogger(__name__)


@api_view(['GET'])
def health(request):
    """Liveness check."""
    return Response({
        'status': 'ok',
        'timestamp': timezone.now().isoformat(),
        'version': getattr(settings, 'CATALOG_API_VERSION', '2.0.0'),
    })


@api_view(['POST'])
def presign_upload(request):
    """
    Prepare an upload.

    Request body:
        {
            "filename": "IMG_0001.JPG",
            "content_type": "image/jpeg",
            "size": 123456,
            "metadata": {"area": "...", "main_theme": "...", "status": "...", ...}
        }

    Returns:
        {
            "upload_url": "...",
            "authorization_token": "...",
            "canonical_name": "20240315_VILACAN_GERAL_TERRAESERT_CAT_A1B2C3D4",
            "file_name": "....jpg",
            "file_path": "01_CATALOGADO/2024/03/15/....jpg",
            "folder_path": "01_CATALOGADO/2024/03/15",
            "headers": {...}
        }

    Error Responses:
        400: filename, metadata.area or metadata.main_theme missing
        502: Storage provider unavailable
    """
    serializer = PresignRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Incomplete upload data', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    data = serializer.validated_data
    try:
        result = UploadService.prepare_upload(
            get_storage_client(),
            filename=data['filename'],
            content_type=data['content_type'],
            metadata=data['metadata'],
        )
    except StorageProviderError as e:
        logger.error(f"Upload preparation failed: {e}")
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
    except Exception as e:
        logger.exception('Upload preparation failed')
        return Response(
            {'error': f'Upload preparation failed: {str(e)}'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(result)


@api_view(['POST'])
def complete_upload(request):
    """
    Confirm a finished upload and create its catalog record.

    Error Responses:
        400: file_path missing
        409: A record with the same canonical name already exists
    """
    serializer = CompleteUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Incomplete upload data', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    data = dict(serializer.validated_data)
    file_path = data.pop('file_path')
    metadata = data.pop('metadata', None) or {}
    actor = data.pop('actor', '')

    try:
        record = UploadService.complete_upload(
            get_storage_client(),
            file_path=file_path,
            metadata=metadata,
            file_info=data,
            actor=actor,
        )
    except CanonicalNameCollision as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except Exception as e:
        logger.exception(f"Upload completion failed for {file_path}")
        return Response(
            {'error': f'Upload completion failed: {str(e)}'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(MediaAssetSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def test_storage_connection(request):
    """Check that the storage provider accepts our credentials."""
    client = get_storage_client()
    try:
        auth = client.authorize()
    except StorageProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'message': 'Connection OK',
        'api_url': auth.api_url,
        'bucket': client.bucket_name,
    })
