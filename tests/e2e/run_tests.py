#!/usr/bin/env python3
"""
RCM Direct Billing E2E Test Runner

Usage:
    python tests/e2e/run_tests.py [options]

Options:
    --smoke         Run smoke tests only
    --regression    Run regression tests only
    --critical      Run critical tests only
    --api           Also run the billing API suite
    --env NAME      Target environment (dev, staging, prod)
    --parallel      Run tests in parallel
    --headed        Run with browser visible
    --no-report     Skip HTML report generation
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

TEST_DIR = Path(__file__).parent
PROJECT_ROOT = TEST_DIR.parent.parent


def marker_expression(smoke=False, regression=False, critical=False):
    """Combine the selected suites into a ``-m`` expression, None for all."""
    selected = [name for name, on in (('smoke', smoke), ('regression', regression), ('critical', critical)) if on]
    return ' or '.join(selected) or None


def build_command(markers=None, include_api=False, parallel=False, headed=False, report=True):
    cmd = [sys.executable, '-m', 'pytest', str(TEST_DIR)]

    if include_api:
        cmd.append(str(PROJECT_ROOT / 'tests' / 'api'))

    cmd.extend(['-v', '--tb=short'])

    if markers:
        cmd.extend(['-m', markers])

    if parallel:
        cmd.extend(['-n', 'auto'])

    if headed:
        cmd.append('--headed')

    if report:
        cmd.extend([
            '--html=test-results/rcm_e2e_report.html',
            '--self-contained-html'
        ])

    return cmd


def run_tests(cmd, env_name=None, include_api=False):
    env = dict(os.environ, RCM_RUN_E2E='1')
    if include_api:
        env['RCM_RUN_API'] = '1'
    if env_name:
        env['ENV'] = env_name

    print(f"Running: {' '.join(cmd)}")

    result = subprocess.run(cmd, cwd=PROJECT_ROOT, env=env)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description='RCM Direct Billing E2E Test Runner')

    parser.add_argument('--smoke', action='store_true', help='Run smoke tests only')
    parser.add_argument('--regression', action='store_true', help='Run regression tests only')
    parser.add_argument('--critical', action='store_true', help='Run critical tests only')
    parser.add_argument('--api', action='store_true', help='Also run the billing API suite')
    parser.add_argument('--env', help='Target environment (dev, staging, prod)')
    parser.add_argument('--parallel', action='store_true', help='Run tests in parallel')
    parser.add_argument('--headed', action='store_true', help='Run with browser visible')
    parser.add_argument('--no-report', action='store_true', help='Skip HTML report generation')

    args = parser.parse_args()

    cmd = build_command(
        markers=marker_expression(args.smoke, args.regression, args.critical),
        include_api=args.api,
        parallel=args.parallel,
        headed=args.headed,
        report=not args.no_report
    )
    return run_tests(cmd, env_name=args.env, include_api=args.api)


if __name__ == '__main__':
    sys.exit(main())
