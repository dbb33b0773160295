"""
Multi-screen RCM workflows used as test prerequisites.

These functions drive several screens in a row (reconcile and import a
patient, post charges, generate claims) and carry the stale-job cleanup and
job polling the batch screens need. Cleanup and lookup helpers are
non-fatal: they log and return a fallback instead of failing the test.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError, Locator, Page, expect

from config.environments import EnvironmentConfig
from models.job_row import PollBudget, TimeoutPolicy
from services.auth_session import perform_login
from services.errors import TransientLookupError, non_fatal
from services.job_completion_poller import JobCompletionPoller
from services.job_launcher import JobLauncher, conflict_dialog_visible, dismiss_conflict_dialog
from services.job_row_cleaner import CLAIM_JOB_MARKERS, POST_CHARGE_JOB_MARKERS, JobRowCleaner
from services.job_table import CombinedRefresh, PlaywrightJobTable, RefreshButton, TabToggle
from services.locator_strategies import (
    AGGRESSIVE_DELETE_SELECTORS,
    CALENDAR_BUTTON_SELECTORS,
    PATIENT_SEARCH_LINK_SELECTORS,
    VIEW_ACTION_SELECTORS,
    first_visible,
)
from utils.date_helper import DateHelper

logger = logging.getLogger(__name__)

CLAIM_GENERATION_PATH = 'Financials#claims/generation'
PATIENT_SEARCH_PATH = 'Financials#patient/search'
PATIENT_IMPORT_PATH = 'Financials#patient/import'

# Post Charges completes in well under two minutes on the shared environments
POST_CHARGE_POLL_BUDGET = PollBudget(max_attempts=20, interval_s=5.0)
CLAIM_JOB_POLL_BUDGET = PollBudget(max_attempts=20, max_duration_s=300.0, interval_s=15.0)

MONEY_PATTERN = r'text=/\$[\d,]+\.\d{2}/'
NUMBER_PATTERN = r'text=/\d+/'


class ReconcileAction(str, Enum):
    HOLD = 'Hold'
    MERGE = 'Merge'
    CREATE_NEW = 'Create New'


@dataclass
class ExistingCharges:
    has_charges: bool = False
    charge_control_numbers: List[str] = field(default_factory=list)


@dataclass
class ClaimStatistics:
    number_of_claims: str = '0'
    amount_of_claims: str = '$0.00'
    number_of_errors: str = '0'
    amount_of_error_claims: str = '$0.00'


def _url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def _probe(locator: Locator, timeout_ms: int = 3000) -> bool:
    try:
        locator.wait_for(state='visible', timeout=timeout_ms)
        return True
    except PlaywrightError:
        return False


def _labelled_value(page: Page, label: str, value_pattern: str, default: str) -> str:
    """Text of the value rendered next to ``label`` (e.g. "Number of Claims:")"""
    value = page.locator(f'text={label}').locator('..').locator(value_pattern).first
    try:
        return (value.text_content(timeout=5000) or default).strip()
    except PlaywrightError:
        return default


def _uncheck_all_rows(page: Page):
    for checkbox in page.locator('table tbody tr td input[type="checkbox"]').all():
        if checkbox.is_checked():
            checkbox.uncheck()
            logger.info("⬜ Unchecked a patient")
    page.wait_for_timeout(500)


# --- Session and navigation -------------------------------------------------

def login(page: Page, config: EnvironmentConfig, user_type: str = 'defaultUser'):
    """Log in and wait for the Financials landing page."""
    perform_login(page, config, user_type)
    page.wait_for_url(re.compile(r'.*Financials.*'), timeout=20000)


def navigate_to_patient_search(page: Page, base_url: str):
    logger.info("Clicking Patients link in main navigation...")
    page.get_by_role('link', name='Patients').first.click()
    page.wait_for_timeout(2000)

    search_link = first_visible(page, PATIENT_SEARCH_LINK_SELECTORS, timeout_ms=5000)
    if search_link is not None:
        search_link.click()
        logger.info("✅ Clicked Search link")
        page.wait_for_timeout(1000)
    else:
        logger.info("Fallback: Navigating directly to patient search URL...")
        page.goto(_url(base_url, PATIENT_SEARCH_PATH), wait_until='domcontentloaded')
        page.wait_for_timeout(3000)

    logger.info("✅ Successfully navigated to Patient Search")


def search_patient(page: Page, entity: str, last_name: str, first_name: str):
    """Search by entity, last name and first name."""
    page.get_by_role('link', name='-- Select an Entity --').click()
    page.get_by_role('option', name=entity, exact=True).click()
    page.wait_for_timeout(500)

    page.get_by_role('textbox').nth(0).fill(last_name)
    page.get_by_role('combobox').nth(1).select_option('firstName')
    page.get_by_role('textbox').nth(1).wait_for(state='attached')
    page.get_by_role('textbox').nth(1).fill(first_name)
    page.get_by_role('button', name='Search').click()


# --- Post charges -----------------------------------------------------------

def post_charge_job_table(page: Page, toggle_tabs: bool = False) -> PlaywrightJobTable:
    refresh = RefreshButton()
    if toggle_tabs:
        # The Refresh button alone does not always re-query the job list
        refresh = CombinedRefresh(refresh, TabToggle('Quick Claims', 'Post Charges', settle_ms=1000))
    return PlaywrightJobTable(page, refresh=refresh)


@non_fatal(fallback_value=0, tag="JOB_CLEANUP")
def delete_old_post_charge_jobs(page: Page, username: Optional[str] = None) -> int:
    """Delete the user's Post Charge jobs so a new job does not conflict."""
    cleaner = JobRowCleaner(post_charge_job_table(page), POST_CHARGE_JOB_MARKERS, max_iterations=20)
    return cleaner.delete_all_matching(username)


@non_fatal(fallback_value=0, tag="JOB_CLEANUP")
def force_delete_all_post_charge_jobs(page: Page, username: Optional[str] = None) -> int:
    """Cleanup after a duplicate-job conflict: wider selectors and longer waits."""
    cleaner = JobRowCleaner(
        post_charge_job_table(page),
        POST_CHARGE_JOB_MARKERS,
        delete_selectors=AGGRESSIVE_DELETE_SELECTORS,
        max_iterations=10,
        action_timeout_ms=2000,
        settle_s=0.5,
        tag="FORCE_CLEANUP",
    )
    return cleaner.delete_all_matching(username)


def wait_for_post_charge_job_completion(
    page: Page,
    budget: PollBudget = POST_CHARGE_POLL_BUDGET,
    username: Optional[str] = None
) -> bool:
    """
    Wait for the newest Post Charge job. Gives up quietly when the budget runs out.

    With ``username`` only that user's jobs count, otherwise the first row does.
    """
    poller = JobCompletionPoller(post_charge_job_table(page, toggle_tabs=True), use_fallback_signal=False)
    return poller.wait_for_completion('', budget, policy=TimeoutPolicy.SOFT, owner=username or None)


def post_charges(
    page: Page,
    entity: str,
    month_offset: int = 0,
    username: Optional[str] = None,
    launcher: Optional[JobLauncher] = None
) -> bool:
    """
    Post charges for ``entity`` over one whole month.

    Old jobs for ``username`` are deleted first. A duplicate-job conflict on
    Start is compensated once by a forced cleanup and a second Start.

    Args:
        month_offset: 0 for the current month, -1 for the previous one.

    Returns:
        Whether the job was seen to complete.
    """
    page.get_by_role('link', name='Revenue').first.click()
    expect(page.locator('#applicationHost')).to_contain_text('Post Charges')

    delete_old_post_charge_jobs(page, username)

    start_date = DateHelper.get_first_date_of_month_with_offset(month_offset)
    end_date = DateHelper.get_last_date_of_month_with_offset(month_offset)
    logger.info(f"📅 Services from {start_date} through {end_date}")

    date_inputs = page.get_by_role('textbox', name='mm/dd/yyyy')
    date_inputs.first.fill(start_date)
    date_inputs.nth(1).fill(end_date)

    page.get_by_role('link', name='-- Select an Entity --').click()
    page.get_by_label('', exact=True).fill(entity)
    page.get_by_text(entity, exact=True).click()

    launcher = launcher or JobLauncher()
    launcher.start(
        start_action=lambda: page.get_by_role('button', name='Start').click(),
        conflict_probe=lambda: conflict_dialog_visible(page),
        dismiss_conflict=lambda: dismiss_conflict_dialog(page),
        cleanup=lambda: force_delete_all_post_charge_jobs(page, username),
    )

    logger.info("📝 Post charge job started - waiting for completion...")
    page.wait_for_timeout(3000)
    return wait_for_post_charge_job_completion(page, username=username)


@non_fatal(fallback_factory=ExistingCharges, tag="CHARGES")
def check_existing_charges(page: Page, patient_account_no: str, specific_date: str = '9/1/2025') -> ExistingCharges:
    """
    Look for charges already posted on ``specific_date`` in the patient ledger.

    Expects the patient search results for the patient to be on screen.
    """
    logger.info(f"🔍 Checking existing charges for patient account {patient_account_no} on {specific_date}")

    page.get_by_title('View detail.').first.click()
    page.wait_for_timeout(2000)

    services_from = page.locator('input[placeholder="mm/dd/yyyy"]').first
    services_to = page.locator('input[placeholder="mm/dd/yyyy"]').nth(1)
    if services_from.is_visible():
        services_from.clear()
        services_from.fill(specific_date)
        services_to.clear()
        services_to.fill(specific_date)
        page.get_by_role('button', name='View').click()
        page.wait_for_timeout(2000)

    result = ExistingCharges()
    for row in page.locator('table tbody tr:has-text("Charge")').all():
        service_dates = row.locator('td').nth(6).text_content() or ''
        if specific_date not in service_dates:
            continue
        result.has_charges = True
        control_number = (row.locator('td').nth(1).text_content() or '').strip()
        if control_number:
            result.charge_control_numbers.append(control_number)
            logger.info(f"📋 Found existing Charge Control Number: {control_number}")

    if result.has_charges:
        logger.info(f"❌ Found {len(result.charge_control_numbers)} existing charge(s) for date {specific_date}")
    else:
        logger.info(f"ℹ️ No charges found for date {specific_date}")
    return result


def review_and_post_charges(page: Page, patient_name: str) -> str:
    """
    Post the charges of one patient from the latest Post Charges job.

    Returns:
        The "Total Amount to Post" shown before posting.
    """
    page.get_by_role('link', name='Post Charges').click()
    page.get_by_title('View').first.click()

    logger.info(f"🔍 Filtering by Patient Name: {patient_name}")
    patient_filter = page.locator(
        'select:near(:text("Patient Name")), input:near(:text("Patient Name")), [placeholder*="Select a patient"]'
    ).first
    if _probe(patient_filter, 5000):
        patient_filter.click()
        page.wait_for_timeout(500)
        patient_filter.fill(patient_name)
        page.wait_for_timeout(1000)
        page.get_by_role('button', name='Search').click()
        page.wait_for_timeout(2000)

    _uncheck_all_rows(page)

    patient_row = page.locator(f'table tbody tr:has-text("{patient_name}")').first
    if _probe(patient_row, 5000):
        patient_row.locator('input[type="checkbox"]').first.check()
        logger.info(f"✅ Selected patient: {patient_name}")
    else:
        first_checkbox = page.locator('table tbody tr td input[type="checkbox"]').first
        if _probe(first_checkbox):
            first_checkbox.check()
            logger.info("✅ Selected first filtered patient")

    checked_row = page.locator('table tbody tr:has(input[type="checkbox"]:checked)').first
    if _probe(checked_row, 5000):
        checked_row.get_by_title('View detail.').click()
    else:
        page.get_by_title('View detail.').first.click()
    page.get_by_title('Return to List').first.click()

    total_amount = _labelled_value(page, 'Total Amount to Post:', MONEY_PATTERN, '$0.00')
    logger.info(f"💰 Total Amount to Post: {total_amount}")

    page.get_by_text('I have reviewed the charges').click()
    page.get_by_role('button', name='Post Charges').click()
    return total_amount


# --- Claims -----------------------------------------------------------------

def claim_job_table(page: Page) -> PlaywrightJobTable:
    return PlaywrightJobTable(page, refresh=RefreshButton())


@non_fatal(fallback_value=0, tag="JOB_CLEANUP")
def force_delete_all_claim_jobs(page: Page, base_url: str, username: Optional[str]) -> int:
    """Delete every claim generation job requested by ``username``."""
    page.goto(_url(base_url, CLAIM_GENERATION_PATH), wait_until='domcontentloaded')
    page.wait_for_timeout(2000)
    cleaner = JobRowCleaner(claim_job_table(page), CLAIM_JOB_MARKERS, max_iterations=10)
    return cleaner.delete_all_matching(username)


def delete_old_claim_jobs(page: Page, base_url: str, username: Optional[str] = None) -> int:
    if not username:
        logger.warning("[JOB_CLEANUP] ⚠️ No username provided - skipping claim job deletion")
        return 0
    return force_delete_all_claim_jobs(page, base_url, username)


def wait_for_claim_job_completion(page: Page, username: str, budget: PollBudget = CLAIM_JOB_POLL_BUDGET) -> bool:
    """Wait for the user's newest claim generation job. False on timeout."""
    logger.info("📝 Claim generation job started - waiting for completion...")
    poller = JobCompletionPoller(claim_job_table(page))
    return poller.wait_for_completion(None, budget, policy=TimeoutPolicy.SOFT, owner=username)


@non_fatal(fallback_value=False, tag="CLAIMS")
def click_view_details_for_recent_claim_job(page: Page, base_url: str, username: str) -> bool:
    """Open the most recent claim generation job requested by ``username``."""
    page.goto(_url(base_url, CLAIM_GENERATION_PATH), wait_until='domcontentloaded')
    page.wait_for_timeout(2000)

    for handle in claim_job_table(page).snapshot():
        try:
            row = handle.read()
        except TransientLookupError:
            continue
        if not row.has_any_marker(CLAIM_JOB_MARKERS) or username not in row.owner_text:
            continue

        logger.info(f"🎯 Found recent job by {username}: {row.row_text[:60]}...")
        view_button = handle.find_action(VIEW_ACTION_SELECTORS)
        if view_button is None:
            logger.warning("⚠️ View Details button not found for this job")
            return False
        view_button.click()
        logger.info("✅ Clicked View Details for recent claim job")
        page.wait_for_timeout(2000)
        return True

    logger.info(f"❌ No recent claim jobs found for user: {username}")
    return False


def _open_services_through_calendar(page: Page):
    calendar_button = first_visible(page, CALENDAR_BUTTON_SELECTORS, timeout_ms=5000)
    if calendar_button is not None:
        calendar_button.click()
        return
    logger.info("⚠️ Could not find calendar button, clicking the date input instead")
    date_input = page.locator('#date-selector-content input[type="text"]').first
    if date_input.is_visible():
        date_input.click()


def create_claim(
    page: Page,
    base_url: str,
    services_through: str,
    patient_name: str,
    username: Optional[str] = None
) -> ClaimStatistics:
    """
    Generate claims through ``services_through`` and create the claim for one patient.

    Returns:
        The statistics shown after Create Claims.
    """
    page.get_by_role('link', name='Claims').first.click()
    page.get_by_role('button', name='Create Claims').click()

    delete_old_claim_jobs(page, base_url, username)

    logger.info(f"📅 Setting services through date: {services_through}")
    _open_services_through_calendar(page)
    page.wait_for_timeout(1000)
    page.locator('#date-selector-content input[type="text"]').first.fill(services_through)
    page.get_by_role('button', name='Ok').click()
    page.get_by_role('link', name='Claims').first.click()

    if username:
        wait_for_claim_job_completion(page, username)
        click_view_details_for_recent_claim_job(page, base_url, username)
        page.wait_for_timeout(2000)

    page.get_by_role('link', name='Batch Claims').click()
    page.get_by_role('link', name='Create Claims').click()
    page.wait_for_timeout(1000)
    _uncheck_all_rows(page)

    logger.info(f"🔍 Searching for patient: {patient_name}")
    page.get_by_title('View').first.click()
    page.get_by_role('link', name='- Select a patient -').click()
    search_input = page.locator('[id*="autogen"][id*="search"]').first
    search_input.wait_for(state='visible', timeout=10000)
    search_input.fill(patient_name)
    page.get_by_role('option', name=patient_name).click()
    page.get_by_role('button', name='Search').click()
    page.wait_for_timeout(1000)

    patient_row = page.locator(f'table tbody tr:has-text("{patient_name}")').first
    patient_row.locator('input[type="checkbox"]').first.check()
    logger.info(f"✅ Selected patient: {patient_name}")

    page.get_by_role('button', name='Create Claims').click()
    page.wait_for_timeout(2000)

    stats = ClaimStatistics(
        number_of_claims=_labelled_value(page, 'Number of Claims:', NUMBER_PATTERN, '0'),
        amount_of_claims=_labelled_value(page, 'Amount of Claims:', MONEY_PATTERN, '$0.00'),
        number_of_errors=_labelled_value(page, 'Number of Errors:', NUMBER_PATTERN, '0'),
        amount_of_error_claims=_labelled_value(page, 'Amount of Error Claims:', MONEY_PATTERN, '$0.00'),
    )
    logger.info(
        f"📊 Claims: {stats.number_of_claims} ({stats.amount_of_claims}), "
        f"errors: {stats.number_of_errors} ({stats.amount_of_error_claims})"
    )
    return stats


def verify_claim_created(page: Page) -> Optional[str]:
    """Claim number of the first claim in the patient ledger."""
    page.get_by_role('link', name='Patients').first.click()
    page.get_by_title('View detail.').first.click()
    claim_number = page.get_by_role('gridcell', name=re.compile(r'^\d+$')).first.text_content()
    logger.info(f"Claim Number: {claim_number}")
    return claim_number


# --- Reconcile patients -----------------------------------------------------

def navigate_to_reconcile_patients(page: Page, base_url: str):
    page.goto(_url(base_url, PATIENT_IMPORT_PATH), wait_until='domcontentloaded')
    page.wait_for_timeout(1000)
    page.get_by_role('link', name='Reconcile Patients').click()
    page.wait_for_timeout(1500)
    logger.info("📋 Navigated to Reconcile Patients screen")


def handle_patient_reconciliation_popup(page: Page) -> bool:
    """Close the "no new patients to reconcile" popup. True if it was shown."""
    if not _probe(page.locator('text=Patient Reconciliation').first):
        return False

    logger.info("⚠️ Patient Reconciliation popup detected - no new patients to reconcile")
    page.get_by_role('button', name='Close').click()
    logger.info("✅ Closed Patient Reconciliation popup")
    return True


def _reconcile_last_names(page: Page) -> Iterable[Tuple[Locator, str]]:
    for row in page.locator('table tbody tr').all():
        try:
            last_name = row.locator('td:nth-child(2)').text_content(timeout=5000)
        except PlaywrightError:
            logger.info("⚠️ Could not read patient name from row, skipping...")
            continue
        if last_name:
            yield row, last_name.strip()


@non_fatal(fallback_value=False, tag="RECONCILE")
def check_patient_available_on_reconcile(page: Page, last_name: str) -> bool:
    logger.info(f"🔍 Checking if patient '{last_name}' is available on Reconcile Patients page...")

    if handle_patient_reconciliation_popup(page):
        return False

    page.wait_for_timeout(1000)
    if not page.locator('table').first.is_visible():
        logger.info("ℹ️ No reconcile table found - no patients available")
        return False

    available = [name for _, name in _reconcile_last_names(page)]
    if last_name in available:
        logger.info(f"✅ Patient '{last_name}' found on Reconcile Patients page")
        return True

    logger.info(f"❌ Patient '{last_name}' not found. Available patients: {', '.join(available[:5]) or 'none'}")
    return False


@non_fatal(fallback_value=False, tag="RECONCILE")
def select_patient_from_reconcile_screen(page: Page, last_name: str, action: ReconcileAction) -> bool:
    expect(page.locator('table').first).to_be_visible()
    page.wait_for_timeout(1000)

    for row, name in _reconcile_last_names(page):
        if name != last_name:
            continue
        dropdown = row.locator('td:last-child select')
        dropdown.click()
        page.wait_for_timeout(500)
        dropdown.select_option(label=ReconcileAction(action).value)
        logger.info(f"Selected \"{ReconcileAction(action).value}\" for patient: {last_name}")
        return True

    logger.error(f"Patient \"{last_name}\" not found in reconcile table")
    return False


@non_fatal(fallback_value=False, tag="RECONCILE")
def process_reconcile_patients_and_import(page: Page, patient_actions: Iterable[Tuple[str, ReconcileAction]]) -> bool:
    """
    Apply a reconcile action per patient, then Import.

    Example:
        process_reconcile_patients_and_import(page, [
            ('AUZMurray', ReconcileAction.CREATE_NEW),
            ('HMBraun', ReconcileAction.HOLD),
        ])
    """
    for last_name, action in patient_actions:
        if not select_patient_from_reconcile_screen(page, last_name, action):
            logger.error(f"Failed to process patient: {last_name}")
            return False
        page.wait_for_timeout(500)

    page.get_by_role('button', name='Import').click()
    logger.info("Clicked Import button - processing reconciliation...")
    page.wait_for_timeout(2000)
    return True


@non_fatal(fallback_value=False, tag="RECONCILE")
def import_unique_patient_from_reconcile(page: Page, unique_last_name: str) -> bool:
    """Create New for ``unique_last_name``, Hold for everyone else, then Import."""
    if handle_patient_reconciliation_popup(page):
        logger.info("ℹ️ Patient already imported - skipping reconciliation")
        return True

    expect(page.locator('table').first).to_be_visible()
    page.wait_for_timeout(1000)

    found = False
    for row, name in _reconcile_last_names(page):
        dropdown = row.locator('td:last-child select')
        dropdown.wait_for(state='visible', timeout=10000)
        if name == unique_last_name:
            dropdown.select_option(label=ReconcileAction.CREATE_NEW.value)
            logger.info(f"✅ Selected \"Create New\" for unique patient: {name}")
            found = True
        else:
            dropdown.select_option(label=ReconcileAction.HOLD.value)
            logger.info(f"⏸️ Selected \"Hold\" for patient: {name}")
        page.wait_for_timeout(200)

    if not found:
        logger.error(f"❌ Unique patient \"{unique_last_name}\" not found in reconcile table")
        return False

    page.get_by_role('button', name='Import').click()
    page.wait_for_timeout(2000)
    logger.info("✅ Successfully imported unique patient and held others")
    return True


def navigate_and_import_unique_patient(page: Page, base_url: str, unique_last_name: str) -> bool:
    """
    Import ``unique_last_name`` from Reconcile Patients if it is waiting there.

    Returns True when there is nothing to import, so the caller can go on to
    search for the patient.
    """
    navigate_to_reconcile_patients(page, base_url)

    if not check_patient_available_on_reconcile(page, unique_last_name):
        logger.info(f"⏭️ Patient '{unique_last_name}' not on Reconcile Patients - skipping import")
        return True

    return import_unique_patient_from_reconcile(page, unique_last_name)
