"""
Unit Tests for the Status Workflow
==================================
Tests cover:
- Seeding the history of a new record
- Unconditional transitions
- Metadata edits with and without a status change
- Rejection of non-editable fields
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.test import SimpleTestCase

from contracts.models import MediaAsset
from catalog.exceptions import WorkflowError
from catalog.services import StatusWorkflowService
from catalog.services.workflow import EDIT_NOTE, INITIAL_NOTE


class FakeClock:
    """Callable clock that advances one minute per call."""

    def __init__(self, start=datetime(2024, 3, 15, 12, 0, tzinfo=dt_timezone.utc)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(minutes=1)
        return value


def make_record(**overrides):
    fields = {
        'canonical_name': '20240315_VILACAN_CRIA_TERRAESERT_ENT_A1B2C3D4',
        'file_name': '20240315_VILACAN_CRIA_TERRAESERT_ENT_A1B2C3D4.jpg',
        'file_path': '00_ENTRADA/2024/03/15/20240315_VILACAN_CRIA_TERRAESERT_ENT_A1B2C3D4.jpg',
        'area': 'Vila Canabrava',
        'main_theme': 'Terra e Sertão',
    }
    fields.update(overrides)
    return MediaAsset(**fields)


class RecordInitialStatusTests(SimpleTestCase):
    """Tests for StatusWorkflowService.record_initial_status."""

    def setUp(self):
        self.clock = FakeClock()

    def test_seeds_single_entry(self):
        record = make_record()
        StatusWorkflowService.record_initial_status(record, 'Catalogado', 'ana', now=self.clock)

        self.assertEqual(record.status, 'Catalogado')
        self.assertEqual(len(record.status_history), 1)
        entry = record.status_history[0]
        self.assertEqual(entry['status'], 'Catalogado')
        self.assertEqual(entry['actor'], 'ana')
        self.assertEqual(entry['note'], INITIAL_NOTE)
        self.assertEqual(entry['timestamp'], '2024-03-15T12:00:00+00:00')

    def test_missing_actor_recorded_as_system(self):
        record = make_record()
        StatusWorkflowService.record_initial_status(record, 'Entrada (Bruto)', None, now=self.clock)
        self.assertEqual(record.status_history[0]['actor'], 'system')

    def test_none_record_raises(self):
        with self.assertRaises(WorkflowError):
            StatusWorkflowService.record_initial_status(None, 'Catalogado', 'ana')


class TransitionTests(SimpleTestCase):
    """Tests for StatusWorkflowService.transition."""

    def setUp(self):
        self.clock = FakeClock()
        self.record = make_record()
        StatusWorkflowService.record_initial_status(self.record, 'Entrada (Bruto)', 'ana', now=self.clock)

    def test_appends_entry_and_updates_status(self):
        StatusWorkflowService.transition(self.record, 'Catalogado', 'bruno', 'triagem feita', now=self.clock)

        self.assertEqual(self.record.status, 'Catalogado')
        self.assertEqual(len(self.record.status_history), 2)
        last = self.record.status_history[-1]
        self.assertEqual(last['status'], 'Catalogado')
        self.assertEqual(last['actor'], 'bruno')
        self.assertEqual(last['note'], 'triagem feita')

    def test_approval_to_published(self):
        StatusWorkflowService.transition(self.record, 'Em aprovação', 'ana', '', now=self.clock)

        StatusWorkflowService.transition(self.record, 'Publicado', 'maria', 'aprovado pela diretoria', now=self.clock)

        self.assertEqual(self.record.status, 'Publicado')
        last = self.record.status_history[-1]
        self.assertEqual(last['status'], 'Publicado')
        self.assertEqual(last['actor'], 'maria')
        self.assertEqual(last['note'], 'aprovado pela diretoria')
        self.assertEqual(self.record.status_history[-2]['status'], 'Em aprovação')

    def test_history_order_is_preserved(self):
        for status in ['Em triagem', 'Catalogado', 'Em produção']:
            StatusWorkflowService.transition(self.record, status, 'ana', '', now=self.clock)

        statuses = [entry['status'] for entry in self.record.status_history]
        self.assertEqual(statuses, ['Entrada (Bruto)', 'Em triagem', 'Catalogado', 'Em produção'])
        timestamps = [entry['timestamp'] for entry in self.record.status_history]
        self.assertEqual(timestamps, sorted(timestamps))

    def test_same_status_is_still_recorded(self):
        StatusWorkflowService.transition(self.record, 'Entrada (Bruto)', 'ana', 'again', now=self.clock)
        self.assertEqual(len(self.record.status_history), 2)

    def test_backwards_jump_is_allowed(self):
        StatusWorkflowService.transition(self.record, 'Publicado', 'ana', '', now=self.clock)
        StatusWorkflowService.transition(self.record, 'Em triagem', 'ana', '', now=self.clock)
        self.assertEqual(self.record.status, 'Em triagem')

    def test_last_entry_matches_status(self):
        StatusWorkflowService.transition(self.record, 'Aprovado', 'ana', '', now=self.clock)
        self.assertEqual(self.record.status_history[-1]['status'], self.record.status)

    def test_earlier_entries_unchanged(self):
        before = [dict(entry) for entry in self.record.status_history]
        StatusWorkflowService.transition(self.record, 'Aprovado', 'ana', '', now=self.clock)
        self.assertEqual(self.record.status_history[:len(before)], before)

    def test_sets_updated_at(self):
        StatusWorkflowService.transition(self.record, 'Aprovado', 'ana', '', now=self.clock)
        self.assertEqual(self.record.updated_at, datetime(2024, 3, 15, 12, 1, tzinfo=dt_timezone.utc))

    def test_none_record_raises(self):
        with self.assertRaises(WorkflowError):
            StatusWorkflowService.transition(None, 'Aprovado', 'ana', '')


class MetadataEditTests(SimpleTestCase):
    """Tests for StatusWorkflowService.apply_metadata_edit."""

    def setUp(self):
        self.clock = FakeClock()
        self.record = make_record()
        StatusWorkflowService.record_initial_status(self.record, 'Catalogado', 'ana', now=self.clock)

    def test_edit_without_status_leaves_history(self):
        StatusWorkflowService.apply_metadata_edit(
            self.record,
            {'area': 'Santa Maria', 'capture_date': date(2024, 1, 2)},
            now=self.clock,
        )
        self.assertEqual(self.record.area, 'Santa Maria')
        self.assertEqual(self.record.capture_date, date(2024, 1, 2))
        self.assertEqual(len(self.record.status_history), 1)

    def test_unchanged_status_leaves_history(self):
        StatusWorkflowService.apply_metadata_edit(self.record, {'status': 'Catalogado'}, now=self.clock)
        self.assertEqual(len(self.record.status_history), 1)

    def test_status_change_appends_entry(self):
        StatusWorkflowService.apply_metadata_edit(
            self.record,
            {'status': 'Em produção', 'chapter': 'Capítulo 05'},
            actor='carla',
            now=self.clock,
        )
        self.assertEqual(self.record.status, 'Em produção')
        self.assertEqual(self.record.chapter, 'Capítulo 05')
        self.assertEqual(len(self.record.status_history), 2)
        last = self.record.status_history[-1]
        self.assertEqual(last['actor'], 'carla')
        self.assertEqual(last['note'], EDIT_NOTE)

    def test_status_change_uses_given_note(self):
        StatusWorkflowService.apply_metadata_edit(
            self.record, {'status': 'Arquivado'}, actor='carla', note='fim', now=self.clock
        )
        self.assertEqual(self.record.status_history[-1]['note'], 'fim')

    def test_identity_fields_rejected(self):
        original_path = self.record.file_path
        with self.assertRaises(WorkflowError):
            StatusWorkflowService.apply_metadata_edit(self.record, {'file_path': 'elsewhere.jpg'})
        self.assertEqual(self.record.file_path, original_path)

    def test_canonical_name_rejected(self):
        with self.assertRaises(WorkflowError):
            StatusWorkflowService.apply_metadata_edit(self.record, {'canonical_name': 'X'})

    def test_none_record_raises(self):
        with self.assertRaises(WorkflowError):
            StatusWorkflowService.apply_metadata_edit(None, {'area': 'X'})
