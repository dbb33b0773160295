"""
Unit tests for job rows and poll budgets.
"""
import pytest

from job_table_fakes import job_row
from models import PollBudget, PollState


class TestJobRow:

    def test_match_on_description_or_owner(self):
        row = job_row(description='Create Claims through 09/30/2025', owner='RekhaK')
        assert row.matches('Create Claims')
        assert row.matches('Rekha')
        assert not row.matches('Services from')

    def test_empty_match_text_matches_any_row(self):
        assert job_row().matches('')
        assert job_row().matches(None)

    def test_owner_filter_is_required_when_given(self):
        row = job_row(owner='alice')
        assert row.matches(None, owner='alice')
        assert not row.matches('Services', owner='bob')

    def test_status_text_is_not_matched(self):
        assert not job_row(status='Clean claims: 7').matches('Clean claims')

    def test_markers_use_row_text(self):
        row = job_row(description='x', row_text='Generated Claim batch 12')
        assert row.has_any_marker(('Generated Claim batch',))
        assert not row.has_any_marker(('Services from',))

    def test_markers_fall_back_to_cells_without_row_text(self):
        row = job_row(description='Services through 09/30/2025', row_text='')
        assert row.has_any_marker(('Services through',))


class TestPollBudget:

    def test_requires_a_bound(self):
        with pytest.raises(ValueError):
            PollBudget(interval_s=2.0)

    @pytest.mark.parametrize('kwargs', [{'max_attempts': 0}, {'max_attempts': 3, 'interval_s': 0}])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            PollBudget(**kwargs)

    @pytest.mark.parametrize('kwargs,expected', [
        ({'max_attempts': 20}, 20),
        ({'max_duration_s': 30.0, 'interval_s': 2.0}, 15),
        ({'max_duration_s': 10.0, 'interval_s': 3.0}, 4),
        ({'max_duration_s': 0.5, 'interval_s': 2.0}, 1),
        ({'max_attempts': 20, 'max_duration_s': 300.0, 'interval_s': 15.0}, 20),
        ({'max_attempts': 5, 'max_duration_s': 300.0, 'interval_s': 15.0}, 5),
    ])
    def test_attempt_limit(self, kwargs, expected):
        assert PollBudget(**kwargs).attempt_limit() == expected


class TestPollState:

    def test_exhausted_by_attempts(self):
        state = PollState(start_timestamp=0.0, max_attempts=2, attempt_count=2)
        assert state.exhausted(0.0)

    def test_exhausted_by_duration(self):
        state = PollState(start_timestamp=100.0, max_attempts=10, max_duration_s=30.0, attempt_count=1)
        assert not state.exhausted(129.0)
        assert state.exhausted(130.0)
        assert state.elapsed(130.0) == 30.0
