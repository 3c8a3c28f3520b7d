"""
Views for catalog stats endpoints.
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response

from catalog.services import CatalogStore
from .serializers import CatalogStatsSerializer, FolderSerializer

logger = logging.getLogger(__name__)


class CatalogStatsView(APIView):
    """
    GET /api/media/stats/

    Returns record totals by kind plus counts by status, area, theme and
    primary nucleus.
    """

    def get(self, request):
        """Get catalog statistics."""
        try:
            stats = CatalogStore.get_statistics()
            serializer = CatalogStatsSerializer(stats)
            return Response(serializer.data)
        except Exception as e:
            logger.exception('Failed to calculate catalog stats')
            return Response(
                {'error': f'Failed to calculate catalog stats: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class FolderListView(APIView):
    """
    GET /api/folders/

    Returns the stage folders in workflow order, each with the number of
    catalogued objects stored under it.
    """

    def get(self, request):
        folders = CatalogStore.folder_counts()
        serializer = FolderSerializer(folders, many=True)
        return Response({
            'count': len(folders),
            'results': serializer.data,
        })
