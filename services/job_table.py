"""
Playwright adapter for the asynchronous job tables on the Post Charges and
Claims Generation screens.

Row handles are only valid for the snapshot that produced them: any click
that mutates the table re-renders every row, so callers must take a fresh
snapshot after each mutation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError, Locator, Page

from models.job_row import JobRow
from services.errors import TransientLookupError
from services.locator_strategies import COMPLETION_ACTION_SELECTORS, first_visible

logger = logging.getLogger(__name__)

JOB_ROW_SELECTOR = 'table tbody tr'


@dataclass(frozen=True)
class JobColumns:
    """Column indexes of the job table (Description, Requested By, Requested On, Status)."""
    description: int = 0
    owner: int = 1
    requested_on: int = 2
    status: int = 3


class RefreshButton:
    """Click the screen's Refresh button if it is rendered."""

    def __init__(self, name: str = 'Refresh', settle_ms: int = 2000):
        self.name = name
        self.settle_ms = settle_ms

    def __call__(self, page: Page):
        button = page.get_by_role('button', name=self.name)
        if button.first.is_visible():
            button.first.click()
            page.wait_for_timeout(self.settle_ms)


class TabToggle:
    """
    Refresh by leaving the tab and coming back.

    Used on screens where the Refresh button does not re-query the job list.
    """

    def __init__(self, away: str, back: str, settle_ms: int = 1000):
        self.away = away
        self.back = back
        self.settle_ms = settle_ms

    def __call__(self, page: Page):
        page.get_by_role('link', name=self.away).click()
        page.wait_for_timeout(self.settle_ms)
        page.get_by_role('link', name=self.back).click()
        page.wait_for_timeout(self.settle_ms)


class CombinedRefresh:
    """Run several refresh strategies in order."""

    def __init__(self, *strategies: Callable[[Page], None]):
        self.strategies = strategies

    def __call__(self, page: Page):
        for strategy in self.strategies:
            strategy(page)


class PlaywrightJobRow:
    """One row of a single table snapshot."""

    def __init__(
        self,
        locator: Locator,
        columns: JobColumns,
        completion_actions: Dict[str, str],
        read_timeout_ms: int = 3000
    ):
        self.locator = locator
        self.columns = columns
        self.completion_actions = completion_actions
        self.read_timeout_ms = read_timeout_ms

    def _cell_text(self, index: int) -> str:
        cell = self.locator.locator('td').nth(index)
        if cell.count() == 0:
            return ''
        return (cell.text_content(timeout=self.read_timeout_ms) or '').strip()

    def read(self) -> JobRow:
        try:
            row_text = self.locator.text_content(timeout=self.read_timeout_ms) or ''
            affordances = frozenset(
                name for name, selector in self.completion_actions.items()
                if self.locator.locator(selector).first.is_visible()
            )
            return JobRow(
                description_text=self._cell_text(self.columns.description),
                owner_text=self._cell_text(self.columns.owner),
                status_text=self._cell_text(self.columns.status),
                action_affordances=affordances,
                row_text=row_text.strip(),
            )
        except PlaywrightError as e:
            raise TransientLookupError(f"Could not read job row: {str(e).splitlines()[0]}")

    def find_action(self, selectors: Sequence[str], timeout_ms: int = 0) -> Optional[Locator]:
        return first_visible(self.locator, selectors, timeout_ms)


class PlaywrightJobTable:
    """Job list on the current page."""

    def __init__(
        self,
        page: Page,
        refresh: Optional[Callable[[Page], None]] = None,
        row_selector: str = JOB_ROW_SELECTOR,
        columns: JobColumns = JobColumns(),
        completion_actions: Optional[Dict[str, str]] = None
    ):
        self.page = page
        self._refresh = refresh
        self.row_selector = row_selector
        self.columns = columns
        self.completion_actions = completion_actions or COMPLETION_ACTION_SELECTORS

    def refresh(self):
        if self._refresh is not None:
            self._refresh(self.page)

    def snapshot(self) -> List[PlaywrightJobRow]:
        """Re-query the rows. Never reuse the result across a mutation."""
        try:
            locators = self.page.locator(self.row_selector).all()
        except PlaywrightError as e:
            raise TransientLookupError(f"Could not list job rows: {str(e).splitlines()[0]}")
        return [PlaywrightJobRow(loc, self.columns, self.completion_actions) for loc in locators]

    def find_control(self, selectors: Sequence[str], timeout_ms: int = 0) -> Optional[Locator]:
        return first_visible(self.page, selectors, timeout_ms)
