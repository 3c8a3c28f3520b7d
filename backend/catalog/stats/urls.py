"""
URL configuration for stats endpoints.
"""
from django.urls import path
from .views import CatalogStatsView, FolderListView

urlpatterns = [
    path('media/stats/', CatalogStatsView.as_view(), name='catalog-stats'),
    path('folders/', FolderListView.as_view(), name='folder-list'),
]
