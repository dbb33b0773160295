"""
RCM automation error taxonomy.

Transient lookup failures are recovered where they happen and never reach
the test. Hard timeouts and setup failures propagate and abort the current
test case. Cleanup failures are logged and swallowed by callers that are
wrapped with ``non_fatal``.
"""

import logging
from datetime import datetime
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    LOOKUP = "lookup"
    TIMEOUT = "timeout"
    SETUP = "setup"
    CONFIGURATION = "configuration"
    CLEANUP = "cleanup"
    UNKNOWN = "unknown"


class RcmAutomationError(Exception):
    """Base exception for the RCM test automation layer."""
    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        recoverable: bool = False,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.recoverable = recoverable
        self.context = context or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'category': self.category.value,
            'recoverable': self.recoverable,
            'context': self.context,
            'timestamp': self.timestamp.isoformat()
        }


class TransientLookupError(RcmAutomationError):
    """An element vanished or was not visible within a short local timeout."""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCategory.LOOKUP, recoverable=True, context=context)


class JobCompletionTimeout(RcmAutomationError):
    """A strict poll ran out of budget without seeing a completion signal."""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCategory.TIMEOUT, recoverable=False, context=context)


class SetupError(RcmAutomationError):
    """Login or session bootstrap failed."""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCategory.SETUP, recoverable=False, context=context)


class ConfigurationError(RcmAutomationError):
    """Unknown environment or an invalid environment configuration."""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCategory.CONFIGURATION, recoverable=False, context=context)


def non_fatal(
    fallback_value: Any = None,
    tag: str = "NON_FATAL",
    fallback_factory: Optional[Callable[[], Any]] = None
):
    """
    Decorator for workflow steps whose failure must not abort the test.

    Use ``fallback_factory`` for mutable fallbacks so each failed call gets
    its own object.

    Usage:
        @non_fatal(fallback_value=False, tag="RECONCILE")
        def check_patient_available(page, last_name):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (JobCompletionTimeout, SetupError, ConfigurationError):
                raise
            except Exception as e:
                logger.error(f"[{tag}] ❌ {func.__name__} failed: {e}", exc_info=True)
                return fallback_factory() if fallback_factory is not None else fallback_value
        return wrapper
    return decorator
