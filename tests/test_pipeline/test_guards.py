"""Tests for the default guards and the hide-loading after-hook."""

from __future__ import annotations

import logging

import pytest

from reqguard.models import DEFAULT_OPTIONS, merge_options
from reqguard.pipeline.guards import (
    has_token,
    hide_loading_hook,
    install_defaults,
    loading_guard,
    network_guard,
    token_guard,
)
from reqguard.pipeline.runner import OutcomeStatus, TaskRunner
from reqguard.platform.base import USER_INFO_KEY


def _options(**overrides):
    return merge_options(DEFAULT_OPTIONS, {"url": "/items", **overrides})


@pytest.fixture
def runner(fake_transport, fake_platform) -> TaskRunner:
    runner = TaskRunner(fake_transport)
    install_defaults(runner, fake_platform, login_path="/login")
    runner.after(lambda payload, options: payload)
    return runner


class TestHasToken:
    def test_token_present(self, fake_platform) -> None:
        assert has_token(fake_platform) is True
        assert fake_platform.calls == [("get_cache", USER_INFO_KEY)]

    def test_token_missing(self, fake_platform) -> None:
        fake_platform.token = None
        assert has_token(fake_platform) is False

    def test_empty_token_counts_as_missing(self, fake_platform) -> None:
        fake_platform.token = ""
        assert has_token(fake_platform) is False

    def test_not_needed_skips_cache(self, fake_platform) -> None:
        fake_platform.token = None
        assert has_token(fake_platform, need_token=False) is True
        assert fake_platform.calls == []


class TestLoadingGuard:
    def test_shows_loading_when_asked(self, fake_platform) -> None:
        assert loading_guard(fake_platform)(_options(show_loading=True)) is True
        assert fake_platform.names() == ["show_loading"]

    def test_silent_by_default(self, fake_platform) -> None:
        assert loading_guard(fake_platform)(_options()) is True
        assert fake_platform.calls == []


class TestTokenGuard:
    def test_missing_token_redirects_and_rejects(
        self, fake_platform, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_platform.token = None
        with caplog.at_level(logging.WARNING, logger="reqguard.pipeline.guards"):
            assert token_guard(fake_platform, "/login")(_options()) is False
        assert ("redirect_to", "/login") in fake_platform.calls
        assert "[token is not found]" in caplog.text

    def test_no_login_path_rejects_without_redirect(self, fake_platform) -> None:
        fake_platform.token = None
        assert token_guard(fake_platform)(_options()) is False
        assert "redirect_to" not in fake_platform.names()

    def test_token_not_needed(self, fake_platform) -> None:
        fake_platform.token = None
        assert token_guard(fake_platform, "/login")(_options(need_token=False)) is True
        assert fake_platform.calls == []


class TestNetworkGuard:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("network_type", ["wifi", "4g", "ethernet"])
    async def test_reachable(self, fake_platform, network_type: str) -> None:
        fake_platform.network_type = network_type
        assert await network_guard(fake_platform)(_options(show_err_msg=True)) is True
        assert "show_toast" not in fake_platform.names()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("network_type", ["none", "unknown"])
    async def test_unreachable_with_toast(self, fake_platform, network_type: str) -> None:
        fake_platform.network_type = network_type
        assert await network_guard(fake_platform)(_options(show_err_msg=True)) is False
        assert ("show_toast", network_type) in fake_platform.calls

    @pytest.mark.asyncio
    async def test_unreachable_silent_without_show_err_msg(self, fake_platform) -> None:
        fake_platform.network_type = "none"
        assert await network_guard(fake_platform)(_options()) is False
        assert "show_toast" not in fake_platform.names()


class TestHideLoadingHook:
    def test_returns_payload_unchanged(self, fake_platform) -> None:
        payload = {"a": 1}
        assert hide_loading_hook(fake_platform)(payload, _options()) is payload
        assert fake_platform.calls == []

    def test_hides_loading_when_shown(self, fake_platform) -> None:
        hide_loading_hook(fake_platform)(None, _options(show_loading=True))
        assert fake_platform.names() == ["hide_loading"]


class TestInstallDefaults:
    def test_registration_order(self, fake_transport, fake_platform) -> None:
        runner = install_defaults(TaskRunner(fake_transport), fake_platform)
        assert runner.guards.names() == ["loading", "token", "network"]
        assert runner.hooks.names() == ["hide_loading"]

    @pytest.mark.asyncio
    async def test_happy_path(self, runner, fake_platform, fake_transport) -> None:
        result = await runner.run_task({"url": "/items", "show_loading": True})

        assert result == {"items": [1, 2, 3]}
        assert fake_platform.names() == [
            "show_loading",
            "get_cache",
            "get_network_type",
            "hide_loading",
        ]
        assert len(fake_transport.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_token_stops_before_network(
        self, runner, fake_platform, fake_transport
    ) -> None:
        fake_platform.token = None

        outcome = await runner.run({"url": "/items", "show_loading": True})

        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.rejected_by == "token"
        # Loading stays shown: the after-hook never runs on rejection.
        assert fake_platform.names() == ["show_loading", "get_cache", "redirect_to"]
        assert fake_transport.requests == []

    @pytest.mark.asyncio
    async def test_offline_rejected_after_token_check(
        self, runner, fake_platform, fake_transport
    ) -> None:
        fake_platform.network_type = "none"

        assert await runner.run_task({"url": "/items", "show_err_msg": True}) is False
        assert fake_platform.names() == ["get_cache", "get_network_type", "show_toast"]
        assert fake_transport.requests == []

    @pytest.mark.asyncio
    async def test_public_call_skips_token(self, runner, fake_platform) -> None:
        fake_platform.token = None
        result = await runner.run_task({"url": "/public", "need_token": False})
        assert result == {"items": [1, 2, 3]}
        assert "get_cache" not in fake_platform.names()
