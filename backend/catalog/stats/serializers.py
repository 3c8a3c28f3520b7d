"""
Serializers for catalog stats endpoints.
"""
from rest_framework import serializers


class CatalogStatsSerializer(serializers.Serializer):
    """Serializer for catalog statistics response."""
    total_items = serializers.IntegerField()
    total_images = serializers.IntegerField()
    total_videos = serializers.IntegerField()
    total_others = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    by_area = serializers.DictField(child=serializers.IntegerField())
    by_theme = serializers.DictField(child=serializers.IntegerField())
    by_nucleus = serializers.DictField(child=serializers.IntegerField())
    timestamp = serializers.DateTimeField()


class FolderSerializer(serializers.Serializer):
    """One stage folder with its object count."""
    id = serializers.CharField()
    name = serializers.CharField()
    slug = serializers.CharField()
    count = serializers.IntegerField()
