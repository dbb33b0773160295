"""
Revenue > Post Charges and Revenue > Quick Claims.
"""

import logging
from typing import Optional

from playwright.sync_api import Page

from pages.rcm.job_screen import JobScreenPage

logger = logging.getLogger(__name__)


class RevenuePage(JobScreenPage):
    """Charge posting and its batch job list"""

    def __init__(self, page: Page, base_url: str = ''):
        super().__init__(page, base_url)
        self.revenue_tab = page.get_by_role('link', name='Revenue')
        self.post_charges_sub_tab = page.get_by_role('link', name='Post Charges')
        self.quick_claims_sub_tab = page.get_by_role('link', name='Quick Claims')

    def navigate_to_post_charges(self):
        self.click_element(self.revenue_tab)
        self.click_element(self.post_charges_sub_tab)
        self.page.wait_for_load_state('networkidle')

    def navigate_to_quick_claims(self):
        self.click_element(self.revenue_tab)
        self.click_element(self.quick_claims_sub_tab)
        self.page.wait_for_load_state('networkidle')

    def post_charges(
        self,
        services_from: str,
        services_to: str,
        division: Optional[str] = None,
        region: Optional[str] = None,
        area: Optional[str] = None,
        entity: Optional[str] = None
    ):
        """Open Post Charges, apply filters and press Start"""
        self.navigate_to_post_charges()
        self.configure_filters(
            services_from=services_from,
            services_to=services_to,
            division=division,
            region=region,
            area=area,
            entity=entity,
        )
        self.click_start()

    def wait_for_job_completion(self, description: str, timeout_ms: int = 30000, interval_ms: int = 2000) -> bool:
        """
        Refresh until the job is no longer running.

        Raises:
            JobCompletionTimeout: the job is still running after ``timeout_ms``.
        """
        return self._wait_for_job(description, timeout_ms, interval_ms)

    def verify_page_loaded(self):
        self.wait_for_element(self.services_from_date_picker)
        self.wait_for_element(self.services_to_date_picker)
        self.wait_for_element(self.start_button)
