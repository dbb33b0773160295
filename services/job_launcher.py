"""
Start a batch job, compensating once for a duplicate-job conflict.

The server refuses a new Post Charges job while a job with the same
parameters exists for the user and shows an "Error Starting Job" dialog.
The launcher dismisses the dialog, runs a forced cleanup and presses Start
exactly one more time.
"""

import logging
import time
from typing import Callable

from playwright.sync_api import Page

from services.locator_strategies import CONFLICT_DIALOG_SELECTORS, DISMISS_DIALOG_SELECTORS, first_visible

logger = logging.getLogger(__name__)


class JobLauncher:
    """Single-retry conflict compensation around a start action."""

    def __init__(self, settle_s: float = 2.0, sleep: Callable[[float], None] = time.sleep):
        self.settle_s = settle_s
        self._sleep = sleep

    def start(
        self,
        start_action: Callable[[], None],
        conflict_probe: Callable[[], bool],
        dismiss_conflict: Callable[[], None],
        cleanup: Callable[[], int]
    ) -> bool:
        """
        Run ``start_action``; on conflict clean up and retry once.

        Returns:
            True if the start had to be retried.
        """
        logger.info("[JOB_START] 🚀 Starting job...")
        start_action()
        self._sleep(self.settle_s)

        if not conflict_probe():
            logger.info("[JOB_START] ✅ Job started successfully")
            return False

        logger.warning("[JOB_START] ❌ Duplicate job error detected - performing additional cleanup...")
        dismiss_conflict()
        removed = cleanup()
        logger.info(f"[JOB_START] 🗑️ Forced cleanup removed {removed} job(s)")
        self._sleep(self.settle_s)

        logger.info("[JOB_START] 🔄 Retrying job creation after aggressive cleanup...")
        start_action()
        self._sleep(self.settle_s)
        return True


def conflict_dialog_visible(page: Page, timeout_ms: int = 3000) -> bool:
    """True when the duplicate-job error dialog is on screen."""
    return first_visible(page, CONFLICT_DIALOG_SELECTORS, timeout_ms) is not None


def dismiss_conflict_dialog(page: Page):
    button = first_visible(page, DISMISS_DIALOG_SELECTORS)
    if button is not None:
        button.click()
        page.wait_for_timeout(1000)
