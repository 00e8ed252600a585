# shopadmin Test Suite - Shared Configuration and Fixtures
#
# This module provides:
# - An in-process fake backend (Flask, see fake_backend.py)
# - Console fixtures wired to it through httpx.WSGITransport
# - Authentication helpers (admin / owner / customer sessions)
# - Failure message formatting for request assertions

from pathlib import Path
from typing import Any, Dict, Generator, Optional

import httpx
import pytest

from shopadmin import Console, create_console
from shopadmin.config import Config
from tests.fake_backend import ADMIN_PASSWORD, BackendState, RecordedRequest, create_backend


# =============================================================================
# CONFIGURATION
# =============================================================================

class ConsoleTestConfig(Config):
    """Console configuration for tests: fake backend, in-memory storage."""
    API_BASE_URL = "http://testserver/api"
    STORAGE_URL = "sqlite:///:memory:"
    REQUEST_TIMEOUT = 5.0
    SEARCH_DEBOUNCE_SECONDS = 0.05


def config_with_storage(path: Path) -> type:
    """Config whose session storage survives across console instances."""
    return type("FileStorageConfig", (ConsoleTestConfig,), {"STORAGE_URL": f"sqlite:///{path}"})


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Custom exception with detailed, human-readable failure messages.

    Structure:
    1. Scenario: What was being tested
    2. Expected: What should have happened
    3. Actual: What actually happened
    4. Code Location: Where to look in the codebase
    """

    __test__ = False

    def __init__(
        self,
        scenario: str,
        expected: str,
        actual: str,
        code_location: str,
        recorded: Optional[RecordedRequest] = None,
        extra_context: Optional[Dict[str, Any]] = None
    ):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.code_location = code_location
        self.recorded = recorded
        self.extra_context = extra_context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"CODE LOCATION: {self.code_location}",
        ]

        if self.recorded is not None:
            lines.extend([
                "-" * 80,
                f"REQUEST: {self.recorded.method} {self.recorded.path}",
                f"CONTENT-TYPE: {self.recorded.content_type}",
                f"JSON: {self.recorded.json}",
                f"FORM: {self.recorded.form}",
                f"FILES: {self.recorded.files}",
            ])

        if self.extra_context:
            lines.append("-" * 80)
            lines.append("EXTRA CONTEXT:")
            for key, value in self.extra_context.items():
                lines.append(f"  {key}: {value}")

        lines.append("=" * 80)
        return "\n".join(lines)


def assert_request(
    recorded: RecordedRequest,
    method: str,
    path: str,
    scenario: str,
    code_location: str,
):
    """
    Assert the wire method and path of a recorded request.
    Raises TestFailure with detailed message on failure.
    """
    if recorded.method != method or recorded.path != path:
        raise TestFailure(
            scenario=scenario,
            expected=f"{method} {path}",
            actual=f"{recorded.method} {recorded.path}",
            code_location=code_location,
            recorded=recorded,
        )


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def backend_state() -> BackendState:
    """Fresh fake backend state with one user per role."""
    state = BackendState()
    state.add_user("Ada Admin", "admin@example.com", "admin")
    state.add_user("Olly Owner", "owner@example.com", "owner")
    state.add_user("Cory Customer", "customer@example.com", "customer")
    return state


@pytest.fixture
def backend(backend_state: BackendState):
    return create_backend(backend_state)


@pytest.fixture
def transport(backend) -> httpx.WSGITransport:
    return httpx.WSGITransport(app=backend)


@pytest.fixture
def console(transport) -> Generator[Console, None, None]:
    """Hydrated, anonymous console."""
    c = create_console(ConsoleTestConfig, transport=transport)
    c.session.hydrate()
    yield c
    c.close()


@pytest.fixture
def admin_console(console: Console) -> Console:
    """Console logged in as the admin user."""
    console.session.login("admin@example.com", ADMIN_PASSWORD)
    return console


@pytest.fixture
def owner_console(console: Console) -> Console:
    """Console logged in as a shop owner."""
    console.session.login("owner@example.com", ADMIN_PASSWORD)
    return console


# =============================================================================
# TEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Session and authentication tests")
    config.addinivalue_line("markers", "shops: Shop store tests")
    config.addinivalue_line("markers", "categories: Category store tests")
    config.addinivalue_line("markers", "items: Item store tests")
    config.addinivalue_line("markers", "options: Option group / option store tests")
    config.addinivalue_line("markers", "assignments: Item option-group assignment tests")
    config.addinivalue_line("markers", "users: User store tests")
    config.addinivalue_line("markers", "concurrent: Stale response / race tests")
    config.addinivalue_line("markers", "cli: Command-line tests")
