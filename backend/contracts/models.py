"""
Shared Data Contract Models
===========================
Persisted representation of the media catalog.

Models:
    - MediaAsset: One catalog record per uploaded photo or video.
      Identity fields (canonical name, storage path) are computed once when
      the upload is prepared; the status history is append-only.
"""

import uuid

from django.db import models

INITIAL_STATUS = 'Entrada (Bruto)'


def generate_asset_id():
    """Random, collision-improbable record id."""
    return uuid.uuid4().hex


class MediaAsset(models.Model):
    """
    A catalogued media file stored with the object-storage provider.

    `status_history` holds `{status, timestamp, actor, note}` entries in the
    order they happened; its last entry always matches `status`.
    """

    KIND_IMAGE = 'image'
    KIND_VIDEO = 'video'
    KIND_OTHER = 'other'
    KIND_CHOICES = [
        (KIND_IMAGE, 'Image'),
        (KIND_VIDEO, 'Video'),
        (KIND_OTHER, 'Other'),
    ]

    id = models.CharField(
        max_length=128,
        primary_key=True,
        default=generate_asset_id,
        help_text="Stable unique identifier assigned at upload completion"
    )
    canonical_name = models.CharField(
        max_length=255,
        help_text="Date/area/nucleus/theme/status/token name, generated once"
    )
    file_name = models.CharField(
        max_length=255,
        help_text="Canonical name plus extension"
    )
    file_path = models.CharField(
        max_length=1024,
        help_text="Object key with the storage provider"
    )
    original_filename = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Filename as chosen by the uploader"
    )
    url = models.CharField(
        max_length=2048,
        blank=True,
        default='',
        help_text="Public download URL"
    )
    thumbnail_url = models.CharField(
        max_length=2048,
        blank=True,
        default='',
        help_text="Preview URL"
    )

    # File metadata
    size = models.BigIntegerField(
        default=0,
        help_text="File size in bytes"
    )
    content_type = models.CharField(
        max_length=100,
        default='application/octet-stream',
        help_text="MIME type of the file"
    )
    extension = models.CharField(
        max_length=16,
        blank=True,
        default='',
        help_text="Lower-case file extension"
    )
    kind = models.CharField(
        max_length=10,
        choices=KIND_CHOICES,
        default=KIND_OTHER,
        help_text="Media kind derived from the extension"
    )
    duration_sec = models.FloatField(
        null=True,
        blank=True,
        help_text="Video duration in seconds"
    )
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)

    # Workflow
    status = models.CharField(
        max_length=64,
        default=INITIAL_STATUS,
        help_text="Current workflow status"
    )
    status_history = models.JSONField(
        default=list,
        blank=True,
        help_text="Append-only list of status changes"
    )

    # Classification (validated by presence only)
    capture_date = models.DateField(
        null=True,
        blank=True,
        help_text="Date the material was captured"
    )
    area = models.CharField(max_length=255, blank=True, default='')
    capture_point = models.CharField(max_length=255, blank=True, default='')
    project_type = models.CharField(max_length=255, blank=True, default='')
    livestock_nucleus = models.CharField(max_length=255, blank=True, default='')
    livestock_subnucleus = models.CharField(max_length=255, blank=True, default='')
    agro_nucleus = models.CharField(max_length=255, blank=True, default='')
    agro_subnucleus = models.CharField(max_length=255, blank=True, default='')
    operation = models.CharField(max_length=255, blank=True, default='')
    sub_operation = models.CharField(max_length=255, blank=True, default='')
    brand = models.CharField(max_length=255, blank=True, default='')
    sub_brand = models.CharField(max_length=255, blank=True, default='')
    main_theme = models.CharField(max_length=255, blank=True, default='')
    secondary_theme = models.CharField(max_length=255, blank=True, default='')
    event = models.CharField(max_length=255, blank=True, default='')
    historical_function = models.CharField(max_length=255, blank=True, default='')
    chapter = models.CharField(max_length=255, blank=True, default='')

    uploaded_by = models.CharField(
        max_length=150,
        blank=True,
        default='',
        help_text="Who completed the upload"
    )

    revision = models.PositiveIntegerField(
        default=0,
        help_text="Incremented on every store write (compare-and-swap)"
    )
    created_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set at first save"
    )
    updated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set at every save"
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Media Asset"
        verbose_name_plural = "Media Assets"
        indexes = [
            models.Index(fields=['canonical_name'], name='asset_canonical_idx'),
            models.Index(fields=['status'], name='asset_status_idx'),
            models.Index(fields=['area'], name='asset_area_idx'),
            models.Index(fields=['main_theme'], name='asset_theme_idx'),
            models.Index(fields=['created_at'], name='asset_created_idx'),
        ]

    def __str__(self):
        return self.file_name or self.canonical_name

    @property
    def primary_nucleus(self):
        """First non-empty nucleus among livestock, agro, operations and brand."""
        for value in (self.livestock_nucleus, self.agro_nucleus, self.operation, self.brand):
            if value:
                return value
        return ''

    @property
    def folder_stage(self):
        """Top-level folder of the stored object."""
        return self.file_path.split('/', 1)[0] if self.file_path else ''
