"""
Unit tests for JobLauncher conflict compensation.
"""
from unittest.mock import MagicMock, Mock

from playwright.sync_api import Error as PlaywrightError

from services.job_launcher import JobLauncher, conflict_dialog_visible, dismiss_conflict_dialog


class TestJobLauncher:

    def make_steps(self, conflicts):
        calls = []
        probes = iter(conflicts)
        return calls, dict(
            start_action=lambda: calls.append('start'),
            conflict_probe=lambda: next(probes),
            dismiss_conflict=lambda: calls.append('dismiss'),
            cleanup=lambda: calls.append('cleanup') or 2,
        )

    def test_no_conflict_starts_once(self):
        calls, steps = self.make_steps([False])

        retried = JobLauncher(sleep=lambda s: None).start(**steps)

        assert retried is False
        assert calls == ['start']

    def test_conflict_dismisses_cleans_up_and_retries_once(self):
        calls, steps = self.make_steps([True, True])

        retried = JobLauncher(sleep=lambda s: None).start(**steps)

        assert retried is True
        assert calls == ['start', 'dismiss', 'cleanup', 'start']

    def test_waits_after_each_start(self):
        sleeps = []
        _, steps = self.make_steps([True])

        JobLauncher(settle_s=2.0, sleep=sleeps.append).start(**steps)

        assert sleeps == [2.0, 2.0, 2.0]


class TestConflictDialog:

    def test_visible_when_error_title_shown(self):
        page = MagicMock()
        page.locator.return_value.first.wait_for.return_value = None

        assert conflict_dialog_visible(page) is True
        page.locator.assert_called_with('text="Error Starting Job"')

    def test_not_visible_when_every_probe_times_out(self):
        page = MagicMock()
        page.locator.return_value.first.wait_for.side_effect = PlaywrightError("Timeout 3000ms exceeded")

        assert conflict_dialog_visible(page, timeout_ms=100) is False
        assert page.locator.call_count == 2

    def test_dismiss_clicks_first_visible_button(self):
        page = MagicMock()
        close_button = Mock()
        close_button.is_visible.return_value = True
        page.locator.return_value.first = close_button

        dismiss_conflict_dialog(page)

        close_button.click.assert_called_once()
        page.locator.assert_called_once_with('button:has-text("Close")')
