#!/usr/bin/env python
"""
Simple Test Runner for DazzleTreeView
=====================================

Runs the test suite with pytest.

Usage:
    python run_tests.py           # Run all tests
    python run_tests.py --cov     # Run with a coverage report
    python run_tests.py -k keyboard   # Only tests matching an expression
"""

import subprocess
import sys
import argparse
from pathlib import Path


def run_tests(coverage=False, expression=None):
    """Run the test suite."""
    cmd = [
        sys.executable, "-m", "pytest",
        "tests",
        "--tb=short",               # Short traceback format
        "--durations=10",           # Show 10 slowest tests
        "-v"                        # Verbose output
    ]

    if coverage:
        cmd.extend(["--cov=dazzletreeview", "--cov-report=term-missing"])
    if expression:
        cmd.extend(["-k", expression])

    print("Running DazzleTreeView tests...")
    print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="Test runner for DazzleTreeView")
    parser.add_argument("--cov", action="store_true", help="Report coverage for the package")
    parser.add_argument("-k", dest="expression", help="Only run tests matching the expression")

    args = parser.parse_args()
    return run_tests(coverage=args.cov, expression=args.expression)


if __name__ == "__main__":
    sys.exit(main())
