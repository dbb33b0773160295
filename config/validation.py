"""
Pre-run environment validation.

Checks an EnvironmentConfig before any browser is launched so a run with a
missing password or a malformed URL fails in one place with a clear
remediation, instead of as a login timeout in every test.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from config.environments import EnvironmentConfig
from services.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check."""
    name: str
    passed: bool
    message: str
    severity: str = "error"  # error, warning
    remediation: Optional[str] = None


@dataclass
class ValidationReport:
    environment: str
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())
    validations: List[ValidationResult] = field(default_factory=list)

    def add_validation(self, result: ValidationResult):
        self.validations.append(result)

    def has_critical_failures(self) -> bool:
        return any(v.severity == "error" and not v.passed for v in self.validations)

    def failures(self) -> List[ValidationResult]:
        return [v for v in self.validations if not v.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "environment": self.environment,
            "validations": [
                {
                    "name": v.name,
                    "passed": v.passed,
                    "message": v.message,
                    "severity": v.severity,
                    "remediation": v.remediation
                }
                for v in self.validations
            ],
            "summary": {
                "total_validations": len(self.validations),
                "passed": sum(1 for v in self.validations if v.passed),
                "failed": sum(1 for v in self.validations if not v.passed),
            }
        }


class ConfigValidator:
    """
    Validates:
    1. Base, login and API URLs are absolute http(s) URLs
    2. The default user has a username and password
    3. Timeouts and retry counts are sane
    """

    def __init__(self, config: EnvironmentConfig):
        self.config = config
        self.report = ValidationReport(environment=config.key)

    def validate_urls(self) -> None:
        urls = {
            "base_url": self.config.base_url,
            "login_url": self.config.effective_login_url,
            "api_url": self.config.api_url,
        }
        for name, value in urls.items():
            parsed = urlparse(value or "")
            ok = parsed.scheme in ("http", "https") and bool(parsed.netloc)
            self.report.add_validation(ValidationResult(
                name=f"url:{name}",
                passed=ok,
                message=f"{name} is {value!r}",
                severity="error" if name != "api_url" else "warning",
                remediation=None if ok else f"Set {self.config.key.upper()}_{name.upper()} to an http(s) URL"
            ))

    def validate_default_user(self) -> None:
        try:
            user = self.config.user('defaultUser')
        except KeyError:
            user = None

        if user is not None and user.is_configured:
            self.report.add_validation(ValidationResult(
                name="user:defaultUser",
                passed=True,
                message=f"Default user {user.username} is configured"
            ))
            return

        prefix = self.config.key.upper()
        self.report.add_validation(ValidationResult(
            name="user:defaultUser",
            passed=False,
            message="Default user credentials are missing",
            remediation=f"Set {prefix}_USER and {prefix}_PASS in the environment or .env"
        ))

    def validate_timeouts(self) -> None:
        self.report.add_validation(ValidationResult(
            name="timeouts",
            passed=self.config.timeout_ms > 0 and self.config.retries >= 0,
            message=f"timeout={self.config.timeout_ms}ms retries={self.config.retries}",
            remediation="timeout_ms must be positive and retries non-negative"
        ))

    def run_all_validations(self) -> ValidationReport:
        self.validate_urls()
        self.validate_default_user()
        self.validate_timeouts()

        summary = self.report.to_dict()["summary"]
        logger.info(f"[CONFIG] Validations: {summary['passed']}/{summary['total_validations']} passed")
        for v in self.report.failures():
            log = logger.error if v.severity == "error" else logger.warning
            log(f"[CONFIG]   - {v.name}: {v.message}")
            if v.remediation:
                log(f"[CONFIG]     Fix: {v.remediation}")
        return self.report

    def raise_on_failure(self) -> ValidationReport:
        report = self.run_all_validations()
        if report.has_critical_failures():
            names = ", ".join(v.name for v in report.failures() if v.severity == "error")
            raise ConfigurationError(
                f"Environment '{self.config.key}' is not usable: {names}",
                context=report.to_dict()
            )
        return report
