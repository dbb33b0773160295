"""
Shared parts of the screens that launch batch jobs (Post Charges, Create
Claims): the organisation filters, Start/Refresh and the job table.
"""

import logging
import re
from typing import Optional

from playwright.sync_api import Locator, Page

from models.job_row import PollBudget, TimeoutPolicy
from pages.base_page import BasePage
from services.job_completion_poller import IN_PROGRESS_PHRASE, JobCompletionPoller
from services.job_table import JobColumns, PlaywrightJobTable

logger = logging.getLogger(__name__)


class JobScreenPage(BasePage):
    """Filters, Start/Refresh buttons and job rows common to the job screens"""

    columns = JobColumns()

    def __init__(self, page: Page, base_url: str = ''):
        super().__init__(page, base_url)
        self.services_from_date_picker = page.locator('input[name*="ServicesFrom"], input[id*="from"]').first
        self.services_to_date_picker = page.locator('input[name*="ServicesThrough"], input[id*="through"]').first
        self.division_dropdown = page.locator('select[name*="Division"], #division').first
        self.region_dropdown = page.locator('select[name*="Region"], #region').first
        self.area_dropdown = page.locator('select[name*="Area"], #area').first
        self.entity_dropdown = page.locator('select[name*="Entity"], #entity').first
        self.job_limit_dropdown = page.locator('select[name*="JobLimit"], select[name*="Limit"]').first
        self.refresh_button = page.get_by_role('button', name=re.compile('Refresh', re.IGNORECASE))
        self.start_button = page.get_by_role('button', name=re.compile('Start', re.IGNORECASE))
        self.results_table = page.locator('table').first
        self.running_in_batch_job_message = page.get_by_text(re.compile(IN_PROGRESS_PHRASE, re.IGNORECASE))

    def set_services_from_date(self, value: str):
        """value: MM/DD/YYYY"""
        self.wait_for_element(self.services_from_date_picker)
        self.services_from_date_picker.clear()
        self.services_from_date_picker.fill(value)

    def set_services_to_date(self, value: str):
        """value: MM/DD/YYYY"""
        self.wait_for_element(self.services_to_date_picker)
        self.services_to_date_picker.clear()
        self.services_to_date_picker.fill(value)

    def _select_and_settle(self, dropdown: Locator, label: str, settle_ms: int = 500):
        self.wait_for_element(dropdown)
        dropdown.select_option(label=label)
        if settle_ms:
            # Dependent dropdowns reload after a selection
            self.page.wait_for_timeout(settle_ms)

    def select_division(self, division: str):
        self._select_and_settle(self.division_dropdown, division)

    def select_region(self, region: str):
        self._select_and_settle(self.region_dropdown, region)

    def select_area(self, area: str):
        self._select_and_settle(self.area_dropdown, area)

    def select_entity(self, entity: str):
        self._select_and_settle(self.entity_dropdown, entity, settle_ms=0)

    def set_job_limit(self, limit: int):
        self._select_and_settle(self.job_limit_dropdown, str(limit), settle_ms=0)

    def configure_filters(
        self,
        services_from: Optional[str] = None,
        services_to: Optional[str] = None,
        division: Optional[str] = None,
        region: Optional[str] = None,
        area: Optional[str] = None,
        entity: Optional[str] = None,
        job_limit: Optional[int] = None
    ):
        if services_from:
            self.set_services_from_date(services_from)
        if services_to:
            self.set_services_to_date(services_to)
        if division:
            self.select_division(division)
        if region:
            self.select_region(region)
        if area:
            self.select_area(area)
        if entity:
            self.select_entity(entity)
        if job_limit:
            self.set_job_limit(job_limit)

    def click_refresh(self):
        self.click_element(self.refresh_button)
        self.page.wait_for_load_state('networkidle')

    def click_start(self):
        self.click_element(self.start_button)
        self.page.wait_for_timeout(1000)

    def is_batch_job_running(self) -> bool:
        return self.is_visible(self.running_in_batch_job_message, timeout=2000)

    def get_job_row_by_description(self, description: str) -> Locator:
        return self.page.locator(f'tr:has-text("{description}")').first

    def _job_cell_text(self, description: str, index: int) -> str:
        cell = self.get_job_row_by_description(description).locator('td').nth(index)
        return cell.text_content() or ''

    def get_job_status(self, description: str) -> str:
        """e.g. "Charges to post: 3" or "Running in a batch job" """
        return self._job_cell_text(description, self.columns.status)

    def get_requested_by(self, description: str) -> str:
        return self._job_cell_text(description, self.columns.owner)

    def get_requested_on(self, description: str) -> str:
        return self._job_cell_text(description, self.columns.requested_on)

    def click_job_action(self, description: str):
        row = self.get_job_row_by_description(description)
        self.click_element(row.locator('button, a').last)

    def job_table(self) -> PlaywrightJobTable:
        """Job table refreshed with the screen's Refresh button"""
        return PlaywrightJobTable(self.page, refresh=lambda page: self.click_refresh(), columns=self.columns)

    def _wait_for_job(self, description: str, timeout_ms: int, interval_ms: int) -> bool:
        poller = JobCompletionPoller(self.job_table())
        budget = PollBudget(max_duration_s=timeout_ms / 1000, interval_s=interval_ms / 1000)
        return poller.wait_for_completion(description, budget, policy=TimeoutPolicy.HARD)
