"""Page objects for the RCM Direct Billing UI."""

from pages.base_page import BasePage
from pages.login_page import LoginPage

__all__ = ['BasePage', 'LoginPage']
