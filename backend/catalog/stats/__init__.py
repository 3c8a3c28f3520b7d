"""
Stats module for catalog overview endpoints.
"""
from .views import CatalogStatsView, FolderListView
from .serializers import CatalogStatsSerializer, FolderSerializer

__all__ = [
    'CatalogStatsView',
    'FolderListView',
    'CatalogStatsSerializer',
    'FolderSerializer',
]
