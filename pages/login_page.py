"""
Login page object.
"""

import logging
import re

from playwright.sync_api import Error as PlaywrightError, Locator, Page

from pages.base_page import BasePage

logger = logging.getLogger(__name__)

POST_LOGIN_URL = re.compile(r'.*/(Home|Dashboard|Index|MainPage|Default|Financials)')


class LoginPage(BasePage):

    def __init__(self, page: Page, login_url: str, base_url: str = ''):
        super().__init__(page, base_url)
        self.login_url = login_url

    @property
    def username_input(self) -> Locator:
        return self.page.locator('#userName, #UserName, input[name="UserName"], input[type="text"]').first

    @property
    def password_input(self) -> Locator:
        return self.page.locator('#Password, input[name="Password"], input[type="password"]').first

    @property
    def login_button(self) -> Locator:
        return self.page.locator(
            'button:has-text("SIGN IN"), button[type="submit"], input[type="submit"], '
            'button:has-text("Login"), input[value="Login"]'
        ).first

    @property
    def error_message(self) -> Locator:
        return self.page.locator('.error, .alert, .validation-summary-errors, [role="alert"]').first

    def navigate_to_login(self):
        self.page.goto(self.login_url)
        self.page.wait_for_load_state('domcontentloaded')

    def login(self, username: str, password: str):
        self.navigate_to_login()
        self.username_input.wait_for(state='visible', timeout=10000)
        self.username_input.fill(username)
        self.password_input.fill(password)
        self.login_button.click()
        try:
            self.page.wait_for_url(POST_LOGIN_URL, timeout=30000)
        except PlaywrightError:
            logger.info("[AUTH] URL did not change after login, waiting for page load")
            self.page.wait_for_load_state('domcontentloaded')

    def verify_error_message(self, expected_message: str) -> bool:
        return expected_message in self.get_text_content(self.error_message)

    def is_login_button_enabled(self) -> bool:
        return self.login_button.is_enabled()
