"""
Authenticated session bootstrap.

Logs in once per test session and saves the browser storage state to
``auth/<user_type>-auth.json``. Browser contexts created with that state
start already signed in.
"""

import logging
from pathlib import Path
from typing import Optional

from playwright.sync_api import Browser, Error as PlaywrightError, Page

from config.environments import EnvironmentConfig
from services.errors import SetupError
from services.locator_strategies import (
    LOGIN_BUTTON_SELECTORS,
    PASSWORD_FIELD_SELECTORS,
    USERNAME_FIELD_SELECTORS,
    first_visible,
)

logger = logging.getLogger(__name__)

DEFAULT_AUTH_DIR = Path(__file__).resolve().parent.parent / 'auth'
POST_LOGIN_MARKERS = 'a:has-text("Patients"), a:has-text("Revenue"), a:has-text("Claims"), a[href*="Logout"]'


def auth_state_path(user_type: str = 'user', auth_dir: Optional[Path] = None) -> Path:
    return Path(auth_dir or DEFAULT_AUTH_DIR) / f"{user_type}-auth.json"


def perform_login(page: Page, config: EnvironmentConfig, user_type: str = 'defaultUser'):
    """Fill the login form and wait for the post-login landing page."""
    credentials = config.user(user_type)
    page.goto(config.effective_login_url, wait_until='domcontentloaded')

    username_field = first_visible(page, USERNAME_FIELD_SELECTORS, timeout_ms=10000)
    password_field = first_visible(page, PASSWORD_FIELD_SELECTORS, timeout_ms=5000)
    login_button = first_visible(page, LOGIN_BUTTON_SELECTORS, timeout_ms=5000)
    if username_field is None or password_field is None or login_button is None:
        raise SetupError("Login form not found", context={'url': page.url})

    username_field.fill(credentials.username)
    password_field.fill(credentials.password)
    login_button.click()

    page.wait_for_timeout(3000)
    try:
        page.wait_for_load_state('networkidle', timeout=config.timeout_ms)
    except PlaywrightError:
        logger.info("[AUTH] Network idle timeout, checking for post-login navigation...")
        try:
            page.locator(POST_LOGIN_MARKERS).first.wait_for(state='visible', timeout=10000)
        except PlaywrightError:
            raise SetupError("Login did not reach the application", context={'url': page.url})


def setup_auth(
    browser: Browser,
    config: EnvironmentConfig,
    user_type: str = 'user',
    credentials_key: str = 'defaultUser',
    auth_dir: Optional[Path] = None
) -> Path:
    """
    Log in and persist the storage state.

    Raises:
        SetupError: login failed. A screenshot is saved next to the state file.
    """
    auth_file = auth_state_path(user_type, auth_dir)
    auth_file.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"[AUTH] 🔐 Setting up {user_type} authentication for {config.name}...")

    context = browser.new_context()
    page = context.new_page()
    try:
        perform_login(page, config, credentials_key)
        context.storage_state(path=str(auth_file))
        logger.info(f"[AUTH] ✅ {user_type} auth state saved to {auth_file}")
        return auth_file
    except (PlaywrightError, SetupError) as e:
        logger.error(f"[AUTH] ❌ Failed to setup {user_type} authentication: {e}")
        logger.info(f"[AUTH] Current URL: {page.url}")
        screenshot_path = auth_file.parent / f"{user_type}-login-error.png"
        try:
            page.screenshot(path=str(screenshot_path))
            logger.info(f"[AUTH] Screenshot saved to: {screenshot_path}")
        except PlaywrightError:
            pass
        if isinstance(e, SetupError):
            raise
        raise SetupError(f"Authentication failed for {user_type}: {e}") from e
    finally:
        context.close()
