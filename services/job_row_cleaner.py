"""
Bulk Row Action Retrier: delete every job row owned by a user.

Deleting a row re-renders the job table, so each iteration re-snapshots the
table, deletes at most one row and starts over. The loop ends on the first
full scan with nothing left to delete, or after ``max_iterations``.
Failures are logged and never raised: stale jobs are a nuisance, not a
reason to abort a test.
"""

import logging
import time
from typing import Callable, Iterable, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError

from services.errors import TransientLookupError
from services.locator_strategies import CONFIRM_SELECTORS, DELETE_ACTION_SELECTORS

logger = logging.getLogger(__name__)

POST_CHARGE_JOB_MARKERS = ('Services from', 'Services through')
CLAIM_JOB_MARKERS = ('Services through', 'Create Claims', 'Generated Claim batch')


class JobRowCleaner:
    """Delete all job rows that match a job-type marker and an owner filter."""

    def __init__(
        self,
        table,
        job_type_markers: Iterable[str],
        delete_selectors: Sequence[str] = DELETE_ACTION_SELECTORS,
        confirm_selectors: Sequence[str] = CONFIRM_SELECTORS,
        max_iterations: int = 10,
        action_timeout_ms: int = 0,
        confirm_timeout_ms: int = 3000,
        settle_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        tag: str = 'JOB_CLEANUP'
    ):
        self._table = table
        self.job_type_markers = tuple(job_type_markers)
        self.delete_selectors = tuple(delete_selectors)
        self.confirm_selectors = tuple(confirm_selectors)
        self.max_iterations = max_iterations
        self.action_timeout_ms = action_timeout_ms
        self.confirm_timeout_ms = confirm_timeout_ms
        self.settle_s = settle_s
        self._sleep = sleep
        self.tag = tag
        self.scan_count = 0

    def delete_all_matching(self, owner_filter: Optional[str], refresh: bool = True) -> int:
        """
        Delete every matching job row.

        Args:
            owner_filter: Requesting-user text. Without it nothing is deleted.
            refresh: Refresh the table before each snapshot.

        Returns:
            Number of rows deleted.
        """
        self.scan_count = 0
        if not owner_filter:
            logger.warning(f"[{self.tag}] ⚠️ No username provided - skipping job deletion")
            return 0

        logger.info(f"[{self.tag}] 🗑️ Deleting jobs requested by: {owner_filter}")
        deleted = 0

        for iteration in range(1, self.max_iterations + 1):
            logger.info(f"[{self.tag}] 🔄 Deletion attempt {iteration}/{self.max_iterations}")

            if refresh:
                try:
                    self._table.refresh()
                except (TransientLookupError, PlaywrightError) as e:
                    logger.warning(f"[{self.tag}] ⚠️ Refresh failed: {e}")

            try:
                rows = self._table.snapshot()
            except TransientLookupError as e:
                logger.warning(f"[{self.tag}] ⚠️ Could not read job table: {e}")
                break
            self.scan_count += 1

            if not rows:
                logger.info(f"[{self.tag}] ℹ️ No jobs found in table")
                break

            if not self._delete_first_match(rows, owner_filter):
                logger.info(f"[{self.tag}] ✅ No more jobs found for deletion")
                break

            deleted += 1
        else:
            logger.warning(
                f"[{self.tag}] ⚠️ Stopped after {self.max_iterations} attempts, "
                f"matching jobs may remain"
            )

        if deleted:
            logger.info(f"[{self.tag}] ✅ Deleted {deleted} job(s) for user: {owner_filter}")
        else:
            logger.info(f"[{self.tag}] ℹ️ No jobs deleted for user: {owner_filter}")
        return deleted

    def _delete_first_match(self, rows, owner_filter: str) -> bool:
        for index, handle in enumerate(rows, start=1):
            try:
                row = handle.read()
            except TransientLookupError:
                logger.info(f"[{self.tag}] ⚠️ Could not read row {index}, skipping")
                continue

            if not row.has_any_marker(self.job_type_markers):
                continue

            if owner_filter not in row.owner_text:
                logger.info(f"[{self.tag}] ⏭️ Skipping job not requested by {owner_filter}: {row.owner_text}")
                continue

            summary = (row.row_text or row.description_text)[:60]
            logger.info(f"[{self.tag}] 🎯 Found job to delete: {summary}...")

            if self._delete_row(handle):
                logger.info(f"[{self.tag}] ✅ Deleted job: {summary}...")
                return True

            logger.warning(f"[{self.tag}] ⚠️ Could not delete job: {summary}...")
        return False

    def _delete_row(self, handle) -> bool:
        control = handle.find_action(self.delete_selectors, timeout_ms=self.action_timeout_ms)
        if control is None:
            return False

        try:
            control.click()
            self._sleep(self.settle_s)
            confirm = self._table.find_control(self.confirm_selectors, timeout_ms=self.confirm_timeout_ms)
            if confirm is not None:
                confirm.click()
                logger.info(f"[{self.tag}] ✅ Confirmed deletion")
                self._sleep(self.settle_s)
        except (TransientLookupError, PlaywrightError) as e:
            logger.warning(f"[{self.tag}] ⚠️ Error deleting job: {e}")
            return False
        return True
