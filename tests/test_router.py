"""Tests for label_switcher.router."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest
import structlog

from label_switcher import rules
from label_switcher.logs import configure_logging
from label_switcher.router import ROUTES, dispatch, resolve


class TestResolve:
    """Tests for resolve()."""

    @pytest.mark.parametrize(
        ("event", "action", "rule"),
        [
            ("pull_request", "opened", rules.handle_opened),
            ("pull_request", "edited", rules.handle_edited),
            ("pull_request", "reopened", rules.handle_reopened),
            ("pull_request", "labeled", rules.handle_labeled),
            ("pull_request", "unlabeled", rules.handle_unlabeled),
            ("pull_request_review", "submitted", rules.handle_review_submitted),
        ],
    )
    def test_known_pairs(self, event: str, action: str, rule) -> None:
        assert resolve(event, action) is rule

    @pytest.mark.parametrize(
        ("event", "action"),
        [
            ("pull_request", "closed"),
            ("pull_request", "synchronize"),
            ("pull_request_review", "edited"),
            ("issues", "opened"),
            ("push", None),
            ("", None),
        ],
    )
    def test_unknown_pairs(self, event: str, action: str | None) -> None:
        assert resolve(event, action) is None

    def test_table_has_six_routes(self) -> None:
        assert len(ROUTES) == 6


class TestDispatch:
    """Tests for dispatch()."""

    @pytest.mark.asyncio
    async def test_runs_matching_rule(self, pr_payload, fake_client) -> None:
        client = fake_client()
        payload = pr_payload(action="opened")
        rule = AsyncMock()
        rule.__name__ = "handle_opened"
        with patch.dict(ROUTES, {("pull_request", "opened"): rule}):
            name = await dispatch("pull_request", payload, client)
        assert name == "handle_opened"
        rule.assert_awaited_once_with(payload, client)

    @pytest.mark.asyncio
    async def test_unknown_event_touches_nothing(self, pr_payload, fake_client) -> None:
        client = fake_client()
        name = await dispatch("issues", pr_payload(action="opened"), client)
        assert name is None
        assert client.mock_calls == []

    @pytest.mark.asyncio
    async def test_missing_action_is_ignored(self, fake_client) -> None:
        client = fake_client()
        assert await dispatch("pull_request", {}, client) is None
        assert client.mock_calls == []

    @pytest.mark.asyncio
    async def test_end_to_end_opened(self, pr_payload, fake_client) -> None:
        client = fake_client()
        await dispatch("pull_request", pr_payload(title="[WIP] x"), client)
        client.add_labels.assert_awaited_once_with(
            "owner/repo", 42, [rules.REVIEW_REQUIRED_LABEL, rules.WIP_LABEL]
        )

    @pytest.mark.asyncio
    async def test_rule_errors_propagate(self, pr_payload, fake_client) -> None:
        client = fake_client()
        client.add_labels.side_effect = RuntimeError("remote down")
        with pytest.raises(RuntimeError, match="remote down"):
            await dispatch("pull_request", pr_payload(), client)


class TestDispatchLogging:
    """dispatch() under the stdlib-backed structlog configuration."""

    @pytest.fixture(autouse=True)
    def _logging(self):
        configure_logging("DEBUG")
        yield
        structlog.reset_defaults()

    @pytest.mark.asyncio
    async def test_applied_rule_is_logged(
        self, pr_payload, fake_client, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG)
        client = fake_client()

        assert await dispatch("pull_request", pr_payload(), client) == "handle_opened"

        record = json.loads(caplog.records[-1].getMessage())
        assert record["event"] == "rule_applied"
        assert record["github_event"] == "pull_request"
        assert record["rule"] == "handle_opened"

    @pytest.mark.asyncio
    async def test_ignored_event_is_logged(
        self, pr_payload, fake_client, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG)

        assert await dispatch("issues", pr_payload(), fake_client()) is None

        record = json.loads(caplog.records[-1].getMessage())
        assert record["event"] == "event_ignored"
        assert record["github_event"] == "issues"
