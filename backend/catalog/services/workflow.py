"""
Status Workflow Service
=======================
Maintains the append-only status history of catalog records.

Any status may follow any other; there is no ordering guard. These
functions mutate the record in memory and leave persistence to the
CatalogStore.
"""

import logging

from django.utils import timezone

from catalog.exceptions import WorkflowError

logger = logging.getLogger(__name__)

INITIAL_NOTE = 'initial upload'
EDIT_NOTE = 'status changed by metadata edit'
SYSTEM_ACTOR = 'system'

# Fields a metadata edit may change
EDITABLE_FIELDS = frozenset({
    'status',
    'capture_date',
    'area',
    'capture_point',
    'project_type',
    'livestock_nucleus',
    'livestock_subnucleus',
    'agro_nucleus',
    'agro_subnucleus',
    'operation',
    'sub_operation',
    'brand',
    'sub_brand',
    'main_theme',
    'secondary_theme',
    'event',
    'historical_function',
    'chapter',
    'original_filename',
    'content_type',
    'duration_sec',
    'width',
    'height',
    'thumbnail_url',
})


class StatusWorkflowService:
    """Status transitions and metadata edits on a MediaAsset."""

    @staticmethod
    def _history_entry(status, actor, note, now):
        return {
            'status': status,
            'timestamp': now.isoformat(),
            'actor': actor or SYSTEM_ACTOR,
            'note': note or '',
        }

    @classmethod
    def record_initial_status(cls, record, status, actor, now=timezone.now):
        """
        Seed the history of a new record with its first status.

        Args:
            record: Unsaved MediaAsset
            status: Initial workflow status
            actor: Who uploaded the asset
            now: Clock callable

        Returns:
            The same record
        """
        if record is None:
            raise WorkflowError('record_initial_status() requires a record')

        record.status_history = [cls._history_entry(status, actor, INITIAL_NOTE, now())]
        record.status = status
        return record

    @classmethod
    def transition(cls, record, new_status, actor, note, now=timezone.now):
        """
        Move a record to `new_status`, appending one history entry.

        Transitions are unconditional: the same status again, or a jump
        across stages, is recorded like any other change.

        Returns:
            The same record
        """
        if record is None:
            raise WorkflowError('transition() requires a record')

        timestamp = now()
        history = list(record.status_history or [])
        history.append(cls._history_entry(new_status, actor, note, timestamp))

        previous = record.status
        record.status_history = history
        record.status = new_status
        record.updated_at = timestamp

        logger.info(f"Record {record.pk}: status {previous!r} -> {new_status!r} by {actor or SYSTEM_ACTOR}")
        return record

    @classmethod
    def apply_metadata_edit(cls, record, patch, actor=None, note=None, now=timezone.now):
        """
        Merge a metadata patch into a record.

        A changed `status` is routed through transition() so the history
        stays consistent; an unchanged one leaves the history untouched.

        Args:
            record: MediaAsset to edit
            patch: Mapping of field name to new value
            actor: Who made the edit
            note: History note used when the status changes

        Returns:
            The same record

        Raises:
            WorkflowError: if the patch touches a non-editable field
        """
        if record is None:
            raise WorkflowError('apply_metadata_edit() requires a record')

        rejected = sorted(set(patch) - EDITABLE_FIELDS)
        if rejected:
            raise WorkflowError(f"Fields cannot be edited: {', '.join(rejected)}")

        new_status = patch.get('status')
        for field, value in patch.items():
            if field == 'status':
                continue
            setattr(record, field, value)

        if new_status is not None and new_status != record.status:
            cls.transition(record, new_status, actor, note or EDIT_NOTE, now=now)

        return record
