from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import MediaAssetViewSet
from .upload_views import health, presign_upload, complete_upload, test_storage_connection
from .taxonomy_views import taxonomy_index, taxonomy_section, taxonomy_sub_items

router = DefaultRouter()
router.register(r'media', MediaAssetViewSet, basename='media')

urlpatterns = [
    path('health/', health, name='health'),
    # Stats routes go first so media/stats/ is not read as a record id
    path('', include('catalog.stats.urls')),
    path('', include(router.urls)),
    # Direct-to-storage upload flow
    path('upload/presigned/', presign_upload, name='upload-presigned'),
    path('upload/complete/', complete_upload, name='upload-complete'),
    path('upload/test/', test_storage_connection, name='upload-test'),
    # Taxonomy
    path('taxonomy/', taxonomy_index, name='taxonomy'),
    path('taxonomy/<slug:section>/', taxonomy_section, name='taxonomy-section'),
    path('taxonomy/<slug:section>/<str:parent>/', taxonomy_sub_items, name='taxonomy-sub-items'),
]
