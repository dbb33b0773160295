"""
Unit tests for the error taxonomy and the non_fatal decorator.
"""
import pytest

from services.errors import (
    ConfigurationError,
    ErrorCategory,
    JobCompletionTimeout,
    SetupError,
    TransientLookupError,
    non_fatal,
)


class TestErrorTaxonomy:

    def test_transient_lookup_is_recoverable(self):
        error = TransientLookupError("row detached", context={'row': 2})
        assert error.recoverable is True
        assert error.category == ErrorCategory.LOOKUP

    def test_to_dict(self):
        data = JobCompletionTimeout("still running", context={'attempts': 15}).to_dict()
        assert data['category'] == 'timeout'
        assert data['recoverable'] is False
        assert data['context'] == {'attempts': 15}
        assert 'timestamp' in data


class TestNonFatal:

    def test_returns_value_on_success(self):
        @non_fatal(fallback_value=0)
        def count():
            return 3

        assert count() == 3

    def test_returns_fallback_on_failure(self):
        @non_fatal(fallback_value=False, tag="RECONCILE")
        def broken():
            raise RuntimeError("boom")

        assert broken() is False

    @pytest.mark.parametrize('error', [
        JobCompletionTimeout("timeout"),
        SetupError("login failed"),
        ConfigurationError("bad env"),
    ])
    def test_fatal_errors_propagate(self, error):
        @non_fatal(fallback_value=None)
        def fails():
            raise error

        with pytest.raises(type(error)):
            fails()

    def test_keeps_function_name(self):
        @non_fatal()
        def delete_jobs():
            pass

        assert delete_jobs.__name__ == 'delete_jobs'

    def test_fallback_factory_builds_a_new_value_per_failure(self):
        @non_fatal(fallback_factory=list)
        def lookup():
            raise RuntimeError("element detached")

        first = lookup()
        first.append('CCN-1')

        assert lookup() == []
        assert lookup() is not first
