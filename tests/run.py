#!/usr/bin/env python3
"""
shopadmin Test Runner

Unified entrypoint for running all test types.

Usage:
    python -m tests.run smoke              # Quick critical path tests
    python -m tests.run full               # All store tests (fake backend)
    python -m tests.run unit               # Pure unit tests only
    python -m tests.run cli                # CLI tests only
    python -m tests.run all                # Everything, with a summary

Options:
    --verbose            Verbose output
"""

import argparse
import sys
import subprocess
import time
from pathlib import Path
from typing import List
from datetime import datetime


# Directories
TESTS_DIR = Path(__file__).parent
ARTIFACTS_DIR = TESTS_DIR / "artifacts"

STORE_MARKERS = [
    "auth", "shops", "categories", "items",
    "options", "assignments", "users", "concurrent",
]


def print_banner(text: str):
    """Print a banner for section headers."""
    width = 80
    print()
    print("=" * width)
    print(f" {text} ".center(width))
    print("=" * width)


def print_result(label: str, passed: bool):
    """Print test result."""
    status = "[PASS]" if passed else "[FAIL]"
    color = "\033[92m" if passed else "\033[91m"
    reset = "\033[0m"
    print(f"{color}{status}{reset} {label}")


class TestRunner:
    """Runs pytest over the selected test directories and markers."""

    __test__ = False

    def __init__(self, args: argparse.Namespace):
        self.args = args
        ARTIFACTS_DIR.mkdir(exist_ok=True)

    def run_pytest(self, label: str, paths: List[Path], markers: List[str] = None) -> int:
        cmd = [sys.executable, "-m", "pytest"]

        if markers:
            cmd.extend(["-m", " or ".join(markers)])

        cmd.extend([
            "-v" if self.args.verbose else "-q",
            "--tb=short",
            f"--junitxml={ARTIFACTS_DIR}/junit-{label}.xml",
        ])
        cmd.extend(str(p) for p in paths)

        print(f"Running: {' '.join(cmd)}")
        return subprocess.call(cmd)

    def run_smoke_tests(self) -> int:
        """Run smoke tests (quick critical paths)."""
        print_banner("SMOKE TESTS")
        return self.run_pytest("smoke", [TESTS_DIR], ["smoke"])

    def run_full_tests(self) -> int:
        """Run all store tests against the fake backend."""
        print_banner("STORE TESTS")
        return self.run_pytest("full", [TESTS_DIR / "api"], STORE_MARKERS)

    def run_unit_tests(self) -> int:
        print_banner("UNIT TESTS")
        return self.run_pytest("unit", [TESTS_DIR / "unit"])

    def run_cli_tests(self) -> int:
        print_banner("CLI TESTS")
        return self.run_pytest("cli", [TESTS_DIR / "cli"])

    def run(self, mode: str) -> int:
        """Run tests in specified mode."""
        start_time = time.time()

        if mode == "smoke":
            result = self.run_smoke_tests()
        elif mode == "full":
            result = self.run_full_tests()
        elif mode == "unit":
            result = self.run_unit_tests()
        elif mode == "cli":
            result = self.run_cli_tests()
        elif mode == "all":
            results = [
                ("Unit Tests", self.run_unit_tests()),
                ("Store Tests", self.run_full_tests()),
                ("CLI Tests", self.run_cli_tests()),
            ]

            print_banner("RESULTS SUMMARY")
            all_passed = True
            for name, code in results:
                passed = code == 0
                print_result(name, passed)
                if not passed:
                    all_passed = False

            result = 0 if all_passed else 1
        else:
            print(f"Unknown mode: {mode}")
            return 1

        elapsed = time.time() - start_time
        print()
        print(f"Total time: {elapsed:.1f}s")

        return result


def main():
    parser = argparse.ArgumentParser(
        description="shopadmin Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  smoke     Quick critical path tests
  full      All store tests against the in-process fake backend
  unit      Pricing, envelopes, payload shaping, HTTP client, storage
  cli       Command-line tests
  all       Unit + store + CLI tests

Examples:
  python -m tests.run smoke
  python -m tests.run full --verbose
        """
    )

    parser.add_argument(
        "mode",
        choices=["smoke", "full", "unit", "cli", "all"],
        help="Test mode to run"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    print_banner(f"SHOPADMIN TEST SUITE - {args.mode.upper()}")
    print(f"Started: {datetime.now().isoformat()}")

    runner = TestRunner(args)
    exit_code = runner.run(args.mode)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
