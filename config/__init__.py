"""
Environment selection.

``ENV`` picks one of the named environments (dev by default). The config is
built once per test session and passed down; nothing below this package
reads environment variables directly.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from config.environments import ENVIRONMENTS, EnvironmentConfig, UserCredentials
from services.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENV = 'dev'


def load_config(env: Optional[str] = None, dotenv: bool = True) -> EnvironmentConfig:
    """Build the EnvironmentConfig for ``env`` (or $ENV, or dev)."""
    if dotenv:
        load_dotenv()

    key = (env or os.environ.get('ENV') or DEFAULT_ENV).strip().lower()
    factory = ENVIRONMENTS.get(key)
    if factory is None:
        raise ConfigurationError(
            f"Unknown environment '{key}'. Expected one of: {', '.join(sorted(ENVIRONMENTS))}",
            context={'env': key}
        )

    config = factory()
    logger.info(f"[CONFIG] Using {config.name} environment ({config.base_url})")
    return config


__all__ = ['DEFAULT_ENV', 'EnvironmentConfig', 'UserCredentials', 'load_config']
