"""
Claims: search, claim generation, batch claims, rebill info, claim
batches and FRP statements.
"""

import logging
import re
from typing import Optional

from playwright.sync_api import Locator, Page

from pages.rcm.job_screen import JobScreenPage

logger = logging.getLogger(__name__)

CLEAN_CLAIMS_PATTERN = re.compile(r'Clean claims:\s*(\d+)', re.IGNORECASE)


def parse_clean_claims(status: Optional[str]) -> int:
    """Clean claims count from a job status, -1 when the status has none"""
    match = CLEAN_CLAIMS_PATTERN.search(status or '')
    return int(match.group(1)) if match else -1


class ClaimsPage(JobScreenPage):

    def __init__(self, page: Page, base_url: str = ''):
        super().__init__(page, base_url)
        self.claims_tab = page.get_by_role('link', name='Claims')
        self.search_sub_tab = page.get_by_role('link', name='Search')
        self.create_claims_sub_tab = page.get_by_role('link', name='Create Claims')
        self.batch_claims_sub_tab = page.get_by_role('link', name='Batch Claims')
        self.rebill_info_sub_tab = page.get_by_role('link', name='Rebill Info')
        self.manage_claim_batches_sub_tab = page.get_by_role('link', name='Manage Claim Batches')
        self.frp_statements_sub_tab = page.get_by_role('link', name='FRP Statements')

        self.paying_agency_dropdown = page.locator('select[name*="PayingAgency"], select[name*="Payer"]').first
        self.plan_dropdown = page.locator('select[name*="Plan"], select[name*="PayerPlan"]').first
        self.require_month_end_close_checkbox = page.locator('input[type="checkbox"][name*="MonthEnd"]').first
        self.require_all_charges_posted_checkbox = page.locator('input[type="checkbox"][name*="AllCharges"]').first
        self.clean_claims_message = page.get_by_text(re.compile('Clean claims:', re.IGNORECASE))

    def _open(self, sub_tab: Locator):
        self.click_element(self.claims_tab)
        self.click_element(sub_tab)
        self.page.wait_for_load_state('networkidle')

    def navigate_to_claim_search(self):
        self._open(self.search_sub_tab)

    def navigate_to_create_claims(self):
        self._open(self.create_claims_sub_tab)

    def navigate_to_batch_claims(self):
        self._open(self.batch_claims_sub_tab)

    def navigate_to_manage_claim_batches(self):
        self._open(self.manage_claim_batches_sub_tab)

    def navigate_to_frp_statements(self):
        self._open(self.frp_statements_sub_tab)

    def navigate_to_rebill_info(self):
        self._open(self.rebill_info_sub_tab)

    def select_paying_agency(self, agency: str):
        # Plan list is populated from the paying agency
        self._select_and_settle(self.paying_agency_dropdown, agency)

    def select_plan(self, plan: str):
        self._select_and_settle(self.plan_dropdown, plan, settle_ms=0)

    @staticmethod
    def _set_checkbox(checkbox: Locator, checked: bool):
        if checkbox.is_checked() != checked:
            checkbox.set_checked(checked)

    def set_require_month_end_close(self, checked: bool):
        self._set_checkbox(self.require_month_end_close_checkbox, checked)

    def set_require_all_charges_posted(self, checked: bool):
        self._set_checkbox(self.require_all_charges_posted_checkbox, checked)

    def configure_claim_filters(
        self,
        services_from: Optional[str] = None,
        services_to: Optional[str] = None,
        division: Optional[str] = None,
        region: Optional[str] = None,
        area: Optional[str] = None,
        entity: Optional[str] = None,
        paying_agency: Optional[str] = None,
        plan: Optional[str] = None,
        job_limit: Optional[int] = None,
        require_month_end_close: Optional[bool] = None,
        require_all_charges_posted: Optional[bool] = None
    ):
        self.configure_filters(
            services_from=services_from,
            services_to=services_to,
            division=division,
            region=region,
            area=area,
            entity=entity,
        )
        if paying_agency:
            self.select_paying_agency(paying_agency)
        if plan:
            self.select_plan(plan)
        if job_limit:
            self.set_job_limit(job_limit)
        if require_month_end_close is not None:
            self.set_require_month_end_close(require_month_end_close)
        if require_all_charges_posted is not None:
            self.set_require_all_charges_posted(require_all_charges_posted)

    def create_claims(
        self,
        services_from: str,
        services_to: str,
        division: Optional[str] = None,
        paying_agency: Optional[str] = None,
        plan: Optional[str] = None
    ):
        self.navigate_to_create_claims()
        self.configure_claim_filters(
            services_from=services_from,
            services_to=services_to,
            division=division,
            paying_agency=paying_agency,
            plan=plan,
        )
        self.click_start()

    def wait_for_claim_job_completion(self, description: str, timeout_ms: int = 60000, interval_ms: int = 3000) -> bool:
        """
        Refresh until the claim generation job is no longer running.

        Raises:
            JobCompletionTimeout: the job is still running after ``timeout_ms``.
        """
        return self._wait_for_job(description, timeout_ms, interval_ms)

    def get_clean_claims_count(self, description: str) -> int:
        return parse_clean_claims(self.get_job_status(description))

    def verify_page_loaded(self):
        self.wait_for_element(self.services_from_date_picker)
        self.wait_for_element(self.start_button)
