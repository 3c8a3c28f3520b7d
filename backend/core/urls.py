"""
Root URL configuration.

All catalog endpoints live under /api/.
"""
from django.urls import path, include

urlpatterns = [
    path('api/', include('catalog.urls')),
]
