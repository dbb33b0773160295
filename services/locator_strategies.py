"""
Prioritised selector lists for the RCM Direct Billing UI.

The application renders the same control in different ways depending on the
screen (title attributes, Font Awesome icons, plain buttons). Each list is
tried in order and the first visible match wins.
"""

import logging
from typing import Optional, Sequence

from playwright.sync_api import Error as PlaywrightError, Locator

logger = logging.getLogger(__name__)

# Row-scoped job actions
DELETE_ACTION_SELECTORS = (
    'button[title*="Delete"]',
    'a[title*="Delete"]',
    '.fa-trash',
    'button:has(.fa-trash)',
    '[title*="delete"]',
)

# Wider net used by forced cleanup after a duplicate-job conflict
AGGRESSIVE_DELETE_SELECTORS = (
    'td:last-child button[title*="Delete"]',
    'td:last-child a[title*="Delete"]',
    'td:last-child .fa-trash',
    'td:last-child .delete-action',
    'td:last-child [class*="delete"]',
)

VIEW_ACTION_SELECTORS = (
    'button[title*="View"]',
    'a[title*="View"]',
    '.fa-eye',
    'button:has(.fa-eye)',
    '[title*="View detail"]',
)

# Presence of any of these inside a job row means the job has finished
COMPLETION_ACTION_SELECTORS = {
    'view': '[title*="View"], [title*="view"], .fa-eye, .view-icon',
    'delete': '[title*="Delete"], [title*="delete"], .fa-trash, .delete-icon',
    'export': '[title*="Export"], [title*="export"], .fa-download, .export-icon',
}

# Page-scoped dialogs
CONFIRM_SELECTORS = (
    'button:has-text("Yes")',
    'button:has-text("OK")',
    'button:has-text("Confirm")',
    'button:has-text("Delete")',
    'button[type="submit"]',
)

CONFLICT_DIALOG_SELECTORS = (
    'text="Error Starting Job"',
    'text=Duplicate job already scheduled',
)

DISMISS_DIALOG_SELECTORS = (
    'button:has-text("Close")',
    'button:has-text("OK")',
    'button:has-text("×")',
)

# Navigation and login
PATIENT_SEARCH_LINK_SELECTORS = (
    'a[href="#patient/search"]',
    'a:has-text("Search")',
)

CALENDAR_BUTTON_SELECTORS = (
    '#date-selector-content button[title*="Calendar"]',
    '#date-selector-content .fa-calendar',
    '#date-selector-content button:has(.fa-calendar)',
    '.input-group-addon button',
    'button[title="Open calendar"]',
    '#date-selector-content button',
)

USERNAME_FIELD_SELECTORS = ('#userName', '#UserName', 'input[name="UserName"]', 'input[id="username"]', 'input[type="text"]')
PASSWORD_FIELD_SELECTORS = ('#Password', 'input[name="Password"]', 'input[id="password"]', 'input[type="password"]')
LOGIN_BUTTON_SELECTORS = (
    'button:has-text("SIGN IN")',
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Login")',
    'input[value="Login"]',
    'button:has-text("Sign In")',
)


def first_visible(scope, selectors: Sequence[str], timeout_ms: int = 0) -> Optional[Locator]:
    """
    Return the first selector in ``selectors`` that is visible inside ``scope``.

    ``scope`` is a Page or Locator. With ``timeout_ms`` the probe waits up to
    that long per selector; without it the check is immediate. Lookup errors
    count as "not found".
    """
    for selector in selectors:
        candidate = scope.locator(selector).first
        try:
            if timeout_ms:
                candidate.wait_for(state='visible', timeout=timeout_ms)
                return candidate
            if candidate.is_visible():
                return candidate
        except PlaywrightError as e:
            logger.debug(f"Selector not matched: {selector} ({str(e).splitlines()[0]})")
    return None
