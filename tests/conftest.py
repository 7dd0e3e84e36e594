"""Shared test fixtures for reqguard.

Provides reusable fixtures for isolated config environments, output state,
fake host platforms and fake transports, and running CLI commands. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from reqguard.models import RequestOptions, TransportResponse
from reqguard.output import OutputFormat, OutputManager, reset_output, set_output
from reqguard.platform.base import USER_INFO_KEY, Platform


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fakes for the pipeline collaborators
# ---------------------------------------------------------------------------


class FakePlatform(Platform):
    """In-memory platform that records every host interaction.

    Attributes:
        token: Token served from the user-info cache (``None`` = missing).
        network_type: Value returned by :meth:`get_network_type`.
        calls: Ordered log of ``(primitive, argument)`` tuples.
    """

    def __init__(self, token: Optional[str] = "tok-123", network_type: str = "wifi") -> None:
        self.token = token
        self.network_type = network_type
        self.calls: list[tuple[str, Any]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def get_cache(self, key: str) -> dict[str, Any]:
        self.calls.append(("get_cache", key))
        if key == USER_INFO_KEY and self.token is not None:
            return {"token": self.token}
        return {}

    async def get_network_type(self) -> str:
        self.calls.append(("get_network_type", None))
        return self.network_type

    def redirect_to(self, path: str) -> None:
        self.calls.append(("redirect_to", path))

    def show_loading(self) -> None:
        self.calls.append(("show_loading", None))

    def hide_loading(self) -> None:
        self.calls.append(("hide_loading", None))

    def show_toast(self, message: str) -> None:
        self.calls.append(("show_toast", message))


class FakeTransport:
    """Transport that returns a canned response or raises a canned error.

    Attributes:
        response: What :meth:`request` resolves to.
        error: Raised by :meth:`request` instead, when set.
        requests: Options of every call received, in order.
    """

    def __init__(self, response: Any = None, error: Optional[BaseException] = None) -> None:
        if response is None:
            response = TransportResponse(
                status_code=200,
                headers={"content-type": "application/json"},
                data={"items": [1, 2, 3]},
            )
        self.response = response
        self.error = error
        self.requests: list[RequestOptions] = []

    async def request(self, options: RequestOptions) -> Any:
        self.requests.append(options)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_platform() -> FakePlatform:
    """A reachable platform with a cached token."""
    return FakePlatform()


@pytest.fixture
def fake_transport() -> FakeTransport:
    """A transport answering 200 with ``{"items": [1, 2, 3]}``."""
    return FakeTransport()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all REQGUARD_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("reqguard.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["REQGUARD_BASE_URL", "REQGUARD_LOGIN_PATH"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
