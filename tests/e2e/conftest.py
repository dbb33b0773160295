"""
E2E test configuration and fixtures for Playwright browser tests.

Logs in once per session and hands the saved storage state to every
browser context, so tests start on an authenticated session.
"""
import pytest
from playwright.sync_api import Browser, Page

from config.validation import ConfigValidator
from pages.login_page import LoginPage
from pages.rcm import ClaimsPage, PatientSearchPage, RevenuePage
from services.auth_session import setup_auth
from utils.test_data_generator import TestDataGenerator


@pytest.fixture(scope="session")
def auth_state(browser: Browser, rcm_config):
    """Storage state of the default user, created once per session."""
    ConfigValidator(rcm_config).raise_on_failure()
    return setup_auth(browser, rcm_config, user_type='user', credentials_key='defaultUser')


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args, auth_state, rcm_config):
    """Authenticated context with the environment's base URL."""
    return {
        **browser_context_args,
        "storage_state": str(auth_state),
        "base_url": rcm_config.base_url,
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }


@pytest.fixture(autouse=True)
def default_timeouts(page: Page, rcm_config):
    page.set_default_timeout(rcm_config.timeout_ms)
    page.set_default_navigation_timeout(rcm_config.timeout_ms)


@pytest.fixture
def financials_page(page: Page, rcm_config) -> Page:
    """Page opened on the RCM landing screen."""
    page.goto(rcm_config.url('Financials'), wait_until='domcontentloaded')
    return page


@pytest.fixture
def login_as_user(browser: Browser, rcm_config):
    """Fresh, unauthenticated context logged in through the login form."""
    context = browser.new_context(ignore_https_errors=True)
    page = context.new_page()
    credentials = rcm_config.user('defaultUser')
    LoginPage(page, rcm_config.effective_login_url, rcm_config.base_url).login(
        credentials.username, credentials.password
    )
    yield page
    context.close()


@pytest.fixture
def patient_search_page(financials_page: Page, rcm_config) -> PatientSearchPage:
    return PatientSearchPage(financials_page, rcm_config.base_url)


@pytest.fixture
def revenue_page(financials_page: Page, rcm_config) -> RevenuePage:
    return RevenuePage(financials_page, rcm_config.base_url)


@pytest.fixture
def claims_page(financials_page: Page, rcm_config) -> ClaimsPage:
    return ClaimsPage(financials_page, rcm_config.base_url)


@pytest.fixture
def patient_data():
    return TestDataGenerator.generate_patient()


@pytest.fixture
def billing_data():
    return TestDataGenerator.generate_billing_data()
