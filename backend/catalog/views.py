import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response

from contracts.models import MediaAsset
from catalog.exceptions import StaleRecordError, WorkflowError
from catalog.filters import MediaAssetFilter
from catalog.serializers import (
    MediaAssetSerializer,
    MediaAssetUpdateSerializer,
    StatusTransitionSerializer,
)
from catalog.services import CatalogStore, StatusWorkflowService

logger = logging.getLogger(__name__)


class MediaPagination(LimitOffsetPagination):
    """
    Pagination for catalog listings.

    - Default limit: 50
    - Maximum limit: 200
    """
    default_limit = 50
    max_limit = 200


class MediaAssetViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        viewsets.GenericViewSet):
    """
    ViewSet for catalog records.

    Provides:
    - List records with pagination and filtering
    - Retrieve a record
    - Edit metadata (PATCH); a status change is appended to the history
    - Explicit status transitions
    - Status history
    - Delete a record

    Records are created by POST /api/upload/complete/, never here.

    Filtering (all use AND logic): area, nucleus, theme, status, kind,
    search, date_from, date_to.

    Sorting:
    - Default: -created_at (newest first)
    - Allowed: created_at, updated_at, capture_date, canonical_name, size, status
    """
    queryset = MediaAsset.objects.all()
    serializer_class = MediaAssetSerializer
    filterset_class = MediaAssetFilter
    pagination_class = MediaPagination
    ordering_fields = ['created_at', 'updated_at', 'capture_date', 'canonical_name', 'size', 'status']
    ordering = ['-created_at']
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return CatalogStore.load_all()

    def partial_update(self, request, *args, **kwargs):
        """
        Merge metadata into a record.

        Identity fields (canonical name, file path) are not editable. When
        `status` differs from the current one, a history entry is appended
        with `actor` and `note`.
        """
        record = self.get_object()

        serializer = MediaAssetUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Invalid metadata', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        patch = dict(serializer.validated_data)
        actor = patch.pop('actor', None)
        note = patch.pop('note', None)

        try:
            StatusWorkflowService.apply_metadata_edit(record, patch, actor=actor, note=note)
            CatalogStore.upsert(record)
        except WorkflowError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except StaleRecordError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except Exception as e:
            logger.exception(f"Metadata edit failed for {record.pk}")
            return Response(
                {'error': f'Update failed: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(MediaAssetSerializer(record).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a catalog record. The stored object is left untouched."""
        record = self.get_object()

        try:
            CatalogStore.delete(record.pk)
        except Exception as e:
            logger.exception(f"Delete failed for {record.pk}")
            return Response(
                {'error': f'Delete failed: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='status')
    def change_status(self, request, pk=None):
        """
        Move a record to a new workflow status.

        Any status may follow any other; the change is always appended to
        the history.
        """
        record = self.get_object()

        serializer = StatusTransitionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Invalid status change', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            StatusWorkflowService.transition(record, data['status'], data['actor'], data['note'])
            CatalogStore.upsert(record)
        except StaleRecordError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except Exception as e:
            logger.exception(f"Status change failed for {record.pk}")
            return Response(
                {'error': f'Status change failed: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(MediaAssetSerializer(record).data)

    @action(detail=True, methods=['get'], url_path='history')
    def history(self, request, pk=None):
        """Status history of a record, oldest first."""
        record = self.get_object()
        return Response({
            'id': record.pk,
            'status': record.status,
            'count': len(record.status_history),
            'results': record.status_history,
        })
