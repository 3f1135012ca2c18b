"""Tests for case snapshot persistence."""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from models.case_state import CaseState, ErrorKind, Phase, PhaseError


def _snapshot(case_id='case-1', **changes):
    state = CaseState(case_id)
    for key, value in changes.items():
        setattr(state, key, value)
    return state.to_dict()


class TestDatabaseService:

    def test_save_then_load(self, database_service):
        assert database_service.save_case_snapshot('case-1', _snapshot())

        record = database_service.get_case_snapshot('case-1')
        assert record['case_id'] == 'case-1'
        assert record['phase'] == 'conversation'
        assert record['status'] == 'waiting_for_customer'
        assert record['snapshot_count'] == 1
        assert len(record['intake_transcript']) == 1

    def test_save_is_an_upsert(self, database_service):
        database_service.save_case_snapshot('case-1', _snapshot())
        database_service.save_case_snapshot('case-1', _snapshot(phase=Phase.SUMMARY))

        record = database_service.get_case_snapshot('case-1')
        assert record['phase'] == 'summary'
        assert record['snapshot_count'] == 2
        assert len(database_service.list_cases()) == 1

    def test_error_message_is_denormalised(self, database_service):
        error = PhaseError(phase=Phase.ANALYSIS, kind=ErrorKind.ANALYSIS_FAILED, message='orchestrator timeout')
        database_service.save_case_snapshot('case-1', _snapshot(phase=Phase.ANALYSIS, last_error=error))

        record = database_service.get_case_snapshot('case-1')
        assert record['status'] == 'attention_required'
        assert record['last_error']['kind'] == 'analysis_failed'

    def test_unknown_case(self, database_service):
        assert database_service.get_case_snapshot('missing') is None

    def test_list_filters_by_status(self, database_service):
        error = PhaseError(phase=Phase.ANALYSIS, kind=ErrorKind.MISSING_DECISION, message='no decision')
        database_service.save_case_snapshot('a', _snapshot('a'))
        database_service.save_case_snapshot('b', _snapshot('b', phase=Phase.ANALYSIS, last_error=error))

        flagged = database_service.list_cases(status='attention_required')
        assert [record['case_id'] for record in flagged] == ['b']
        assert len(database_service.list_cases()) == 2

    def test_database_errors_are_reported_not_raised(self, database_service):
        with patch.object(database_service, 'SessionLocal', side_effect=OperationalError('stmt', {}, Exception('down'))):
            assert database_service.save_case_snapshot('case-1', _snapshot()) is False
            assert database_service.get_case_snapshot('case-1') is None
            assert database_service.list_cases() == []
