"""
Named RCM Direct Billing environments.

Each environment reads its own prefixed variables (DEV_*, STAGING_*, PROD_*)
so several sets of credentials can live in one .env file.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class UserCredentials:
    username: str
    password: str
    role: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class EnvironmentConfig:
    """Everything a test run needs to know about one environment."""
    key: str
    name: str
    base_url: str
    api_url: str
    login_url: Optional[str] = None
    timeout_ms: int = 30000
    retries: int = 0
    users: Dict[str, UserCredentials] = field(default_factory=dict)
    modules: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def effective_login_url(self) -> str:
        return self.login_url or f"{self.base_url.rstrip('/')}/Login"

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def user(self, user_type: str = 'defaultUser') -> UserCredentials:
        try:
            return self.users[user_type]
        except KeyError:
            raise KeyError(f"No '{user_type}' user configured for {self.name}")


def _env(name: str, default: str = '') -> str:
    return os.environ.get(name, default)


def dev_config() -> EnvironmentConfig:
    return EnvironmentConfig(
        key='dev',
        name='Development - RCM Direct Billing',
        base_url=_env('DEV_BASE_URL', 'https://basereg.therapy.nethealth.com'),
        login_url=_env('DEV_LOGIN_URL', 'https://basereg.therapy.nethealth.com/Login/'),
        api_url=_env('DEV_API_URL', 'https://api-dev-rcm-db.nethealth.com'),
        timeout_ms=30000,
        retries=1,
        users={
            'defaultUser': UserCredentials(
                _env('DEV_USER', 'Optima.RambabuN'), _env('DEV_PASS'), 'Standard User'
            ),
            'admin': UserCredentials(
                _env('DEV_ADMIN_USER', 'admin@nethealth.com'), _env('DEV_ADMIN_PASS'), 'Administrator'
            ),
            'billing': UserCredentials(
                _env('DEV_BILLING_USER', 'billing.user@nethealth.com'), _env('DEV_BILLING_PASS'), 'Billing Specialist'
            ),
        },
        modules={
            'patients': {'endpoint': '/Financials#/patient/search'},
            'revenue': {
                'postCharges': '/Financials#/revenue/revenue',
                'quickClaims': '/Financials#/revenue/quickclaims',
            },
            'claims': {
                'search': '/Financials#/claims/search',
                'createClaims': '/Financials#/claims/generation',
                'batchClaims': '/Financials#/claims/batch',
                'manageBatches': '/Financials#/claims/managebatches',
                'frpStatements': '/Financials#/claims/frp',
            },
        },
    )


def staging_config() -> EnvironmentConfig:
    return EnvironmentConfig(
        key='staging',
        name='Staging',
        base_url=_env('STAGING_BASE_URL', 'https://staging-rcm-db.nethealth.com'),
        api_url=_env('STAGING_API_URL', 'https://api-staging-rcm-db.nethealth.com'),
        timeout_ms=30000,
        retries=2,
        users={
            'defaultUser': UserCredentials(_env('STAGING_USER', 'testuser@nethealth.com'), _env('STAGING_PASS')),
            'admin': UserCredentials(_env('STAGING_ADMIN_USER', 'admin@nethealth.com'), _env('STAGING_ADMIN_PASS')),
        },
    )


def prod_config() -> EnvironmentConfig:
    return EnvironmentConfig(
        key='prod',
        name='Production',
        base_url=_env('PROD_BASE_URL', 'https://rcm-db.nethealth.com'),
        api_url=_env('PROD_API_URL', 'https://api-rcm-db.nethealth.com'),
        timeout_ms=30000,
        retries=3,
        users={
            'defaultUser': UserCredentials(_env('PROD_USER'), _env('PROD_PASS')),
            'admin': UserCredentials(_env('PROD_ADMIN_USER'), _env('PROD_ADMIN_PASS')),
        },
    )


ENVIRONMENTS = {
    'dev': dev_config,
    'staging': staging_config,
    'prod': prod_config,
}
