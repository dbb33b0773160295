"""
Root pytest configuration shared by the unit, e2e and API suites.

Browser (tests/e2e) and API (tests/api) suites need a live environment and
only run when RCM_RUN_E2E=1 / RCM_RUN_API=1.
"""
import os
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import load_config  # noqa: E402

LIVE_SUITES = {
    'e2e': 'RCM_RUN_E2E',
    'api': 'RCM_RUN_API',
}


def pytest_collection_modifyitems(config, items):
    """Tag tests with their suite marker and skip live suites unless enabled."""
    for item in items:
        path = str(item.path)
        for suite in ('unit', 'e2e', 'api'):
            if f"{os.sep}tests{os.sep}{suite}{os.sep}" not in path:
                continue
            item.add_marker(getattr(pytest.mark, suite))
            flag = LIVE_SUITES.get(suite)
            if flag and os.environ.get(flag) != '1':
                item.add_marker(pytest.mark.skip(reason=f"set {flag}=1 to run against a live environment"))


@pytest.fixture(scope="session")
def rcm_config():
    """EnvironmentConfig for $ENV, built once per session."""
    return load_config()
