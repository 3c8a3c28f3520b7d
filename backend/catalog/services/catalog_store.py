"""
Catalog Store
=============
Persistence of catalog records through the ORM.

Writes are per-record and guarded by a revision counter: an update only
lands if nobody else saved the record since it was read.
"""

import logging
from collections import Counter
from typing import Optional

from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from contracts.models import MediaAsset
from catalog.exceptions import StaleRecordError
from catalog.services.naming import FOLDER_STAGES

logger = logging.getLogger(__name__)


class CatalogStore:
    """Record-level load/upsert/delete plus catalog statistics."""

    @staticmethod
    def load_all():
        """All records, newest first."""
        return MediaAsset.objects.all()

    @staticmethod
    def get_by_id(asset_id) -> Optional[MediaAsset]:
        """Record with the given id, or None."""
        if not asset_id:
            return None
        return MediaAsset.objects.filter(pk=asset_id).first()

    @staticmethod
    def exists_canonical_name(canonical_name, lock=False) -> bool:
        """True if a record already carries this name; `lock` holds matching rows for the enclosing transaction."""
        queryset = MediaAsset.objects.filter(canonical_name=canonical_name)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.exists()

    @staticmethod
    def upsert(record: MediaAsset, now=None) -> MediaAsset:
        """
        Insert a new record or update an existing one.

        New records get `created_at`, `updated_at` and revision 1. Updates
        compare-and-swap on `revision` and bump it.

        Raises:
            StaleRecordError: if the stored revision moved since the record was read
        """
        now = now or timezone.now()

        with transaction.atomic():
            is_new = record._state.adding and not MediaAsset.objects.filter(pk=record.pk).exists()

            if is_new:
                record.created_at = record.created_at or now
                record.updated_at = now
                record.revision = 1
                record.save(force_insert=True)
                logger.info(f"Created catalog record {record.pk} ({record.file_path})")
                return record

            expected_revision = record.revision
            record.updated_at = now
            values = {
                field.attname: getattr(record, field.attname)
                for field in MediaAsset._meta.concrete_fields
                if not field.primary_key
            }
            values['revision'] = expected_revision + 1

            updated = MediaAsset.objects.filter(
                pk=record.pk,
                revision=expected_revision,
            ).update(**values)

            if not updated:
                logger.warning(f"Stale write rejected for record {record.pk} at revision {expected_revision}")
                raise StaleRecordError(
                    f"Record {record.pk} was modified by another request; reload and retry"
                )

            record.revision = expected_revision + 1
            record._state.adding = False
            return record

    @staticmethod
    def delete(asset_id) -> bool:
        """Delete a record; False when it does not exist."""
        deleted, _ = MediaAsset.objects.filter(pk=asset_id).delete()
        if deleted:
            logger.info(f"Deleted catalog record {asset_id}")
        return bool(deleted)

    @staticmethod
    def get_statistics() -> dict:
        """
        Catalog totals.

        Returns:
            dict: Contains:
                - total_items, total_images, total_videos, total_others
                - by_status, by_area, by_theme, by_nucleus: value -> count
        """
        queryset = MediaAsset.objects.all()

        kinds = dict(queryset.values_list('kind').annotate(count=Count('pk')).order_by())

        def counts_by(field):
            rows = queryset.values_list(field).annotate(count=Count('pk')).order_by(field)
            return {value: count for value, count in rows}

        nuclei = Counter()
        for record in queryset.only('livestock_nucleus', 'agro_nucleus', 'operation', 'brand'):
            nucleus = record.primary_nucleus
            if nucleus:
                nuclei[nucleus] += 1

        return {
            'total_items': queryset.count(),
            'total_images': kinds.get(MediaAsset.KIND_IMAGE, 0),
            'total_videos': kinds.get(MediaAsset.KIND_VIDEO, 0),
            'total_others': kinds.get(MediaAsset.KIND_OTHER, 0),
            'by_status': counts_by('status'),
            'by_area': counts_by('area'),
            'by_theme': counts_by('main_theme'),
            'by_nucleus': dict(nuclei),
            'timestamp': timezone.now(),
        }

    @staticmethod
    def folder_counts() -> list:
        """Stage folders in workflow order with the number of objects under each."""
        folders = []
        for stage in FOLDER_STAGES:
            count = MediaAsset.objects.filter(file_path__startswith=f"{stage['slug']}/").count()
            folders.append({**stage, 'count': count})
        return folders
