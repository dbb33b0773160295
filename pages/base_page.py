"""
Base page object shared by the RCM screens.
"""

import logging
from pathlib import Path
from typing import Optional, Pattern, Union

from playwright.sync_api import Error as PlaywrightError, Locator, Page

logger = logging.getLogger(__name__)

SCREENSHOT_DIR = Path('screenshots')


class BasePage:
    """Navigation and element helpers with built-in waiting"""

    def __init__(self, page: Page, base_url: str = ''):
        self.page = page
        self.base_url = base_url.rstrip('/')

    def goto(self, path: str):
        """Navigate to ``path`` (absolute, or relative to base_url)"""
        url = path if path.startswith('http') or not self.base_url else f"{self.base_url}/{path.lstrip('/')}"
        self.page.goto(url)
        self.page.wait_for_load_state('networkidle')

    def wait_for_element(self, locator: Locator, timeout: int = 10000):
        locator.wait_for(state='visible', timeout=timeout)

    def click_element(self, locator: Locator):
        self.wait_for_element(locator)
        locator.click()

    def fill_input(self, locator: Locator, text: str):
        self.wait_for_element(locator)
        locator.fill(text)

    def get_text_content(self, locator: Locator) -> str:
        self.wait_for_element(locator)
        return locator.text_content() or ''

    def is_visible(self, locator: Locator, timeout: int = 5000) -> bool:
        """Visibility probe that never raises"""
        try:
            locator.wait_for(state='visible', timeout=timeout)
            return True
        except PlaywrightError:
            return False

    def take_screenshot(self, name: str) -> Path:
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)
        path = SCREENSHOT_DIR / f"{name}.png"
        self.page.screenshot(path=str(path), full_page=True)
        logger.info(f"📸 Screenshot saved: {path}")
        return path

    def wait_for_navigation(self, url_pattern: Optional[Union[str, Pattern[str]]] = None):
        if url_pattern:
            self.page.wait_for_url(url_pattern)
        self.page.wait_for_load_state('networkidle')
