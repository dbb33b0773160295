"""
Unit test fixtures. No browser, no network.
"""
import pytest

from job_table_fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def no_sleep():
    return lambda seconds: None
