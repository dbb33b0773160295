"""
Patients > Search and Patients > Reconcile Patients.
"""

import logging
import re
from typing import Optional

from playwright.sync_api import Error as PlaywrightError, Locator, Page

from pages.base_page import BasePage

logger = logging.getLogger(__name__)

TOTAL_RECORDS_PATTERN = re.compile(r'of (\d+) entries')


class PatientSearchPage(BasePage):
    """Patient search filters and the results grid"""

    def __init__(self, page: Page, base_url: str = ''):
        super().__init__(page, base_url)
        self.patients_tab = page.get_by_role('link', name='Patients')
        self.search_sub_tab = page.get_by_role('link', name='Search')
        self.reconcile_patients_sub_tab = page.get_by_role('link', name='Reconcile Patients')

        self.agency_site_dropdown = page.locator('select[name*="Agency"], select[name*="Site"], #agency, #site').first
        self.branch_dropdown = page.locator('select[name*="Branch"], #branch').first
        self.last_name_input = page.locator('input[name*="LastName"], input[name*="lastname"], #lastname').first
        self.hold_frp_statement_dropdown = page.locator(
            'select[name*="HoldFRP"], select[name*="Statement"], #holdfrp'
        ).first
        self.additional_criteria_dropdown = page.locator('select[name*="Additional"], select[name*="Criteria"]').first
        self.search_button = page.get_by_role('button', name=re.compile('Search', re.IGNORECASE))

        self.results_table = page.locator('table').first
        self.no_results_message = page.get_by_text(re.compile('No Patients to display', re.IGNORECASE))
        self.show_entries_dropdown = page.locator('select[name*="length"]')
        self.entries_footer = page.locator(r'text=/Showing \d+ to \d+ of \d+ entries/')

    def navigate_to_patient_search(self):
        self.click_element(self.patients_tab)
        self.page.wait_for_load_state('networkidle')

    def navigate_to_reconcile_patients(self):
        self.click_element(self.patients_tab)
        self.click_element(self.reconcile_patients_sub_tab)
        self.page.wait_for_load_state('networkidle')

    def select_agency_site(self, agency_name: str):
        self.wait_for_element(self.agency_site_dropdown)
        self.agency_site_dropdown.select_option(label=agency_name)
        # Branch list is populated from the selected agency
        self.page.wait_for_timeout(500)

    def select_branch(self, branch_name: str):
        self.wait_for_element(self.branch_dropdown)
        self.branch_dropdown.select_option(label=branch_name)

    def enter_last_name(self, last_name: str):
        self.fill_input(self.last_name_input, last_name)

    def select_hold_frp_statement(self, option: str):
        """option: All, Yes or No"""
        self.wait_for_element(self.hold_frp_statement_dropdown)
        self.hold_frp_statement_dropdown.select_option(label=option)

    def select_additional_criteria(self, criteria: str):
        self.wait_for_element(self.additional_criteria_dropdown)
        self.additional_criteria_dropdown.select_option(label=criteria)

    def click_search(self):
        self.click_element(self.search_button)
        self.page.wait_for_load_state('networkidle')
        self.page.wait_for_timeout(1000)

    def search_patient(
        self,
        agency_site: Optional[str] = None,
        branch: Optional[str] = None,
        last_name: Optional[str] = None,
        hold_frp_statement: Optional[str] = None
    ):
        """Fill whichever filters are given, then search"""
        if agency_site:
            self.select_agency_site(agency_site)
        if branch:
            self.select_branch(branch)
        if last_name:
            self.enter_last_name(last_name)
        if hold_frp_statement:
            self.select_hold_frp_statement(hold_frp_statement)
        self.click_search()

    def has_search_results(self) -> bool:
        if self.is_visible(self.no_results_message, timeout=2000):
            return False
        return self.is_visible(self.results_table, timeout=10000)

    def get_patient_row_by_account_no(self, account_no: str) -> Locator:
        return self.page.locator(f'tr:has-text("{account_no}")').first

    def get_patient_row_by_last_name(self, last_name: str) -> Locator:
        return self.page.locator(f'tr:has-text("{last_name}")').first

    def click_patient_action(self, account_no: str):
        row = self.get_patient_row_by_account_no(account_no)
        self.click_element(row.locator('button, a').last)

    def set_show_entries(self, count: int):
        """count: 10, 25, 50 or 100"""
        self.wait_for_element(self.show_entries_dropdown)
        self.show_entries_dropdown.select_option(label=str(count))
        self.page.wait_for_load_state('networkidle')

    def get_total_records(self) -> int:
        """Total from the "Showing x to y of N entries" footer, 0 when absent"""
        try:
            text = self.entries_footer.text_content(timeout=5000)
        except PlaywrightError:
            return 0
        return parse_total_records(text)

    def verify_page_loaded(self):
        self.wait_for_element(self.search_button)
        self.wait_for_element(self.agency_site_dropdown)


def parse_total_records(footer_text: Optional[str]) -> int:
    match = TOTAL_RECORDS_PATTERN.search(footer_text or '')
    return int(match.group(1)) if match else 0
