"""Dispatch of webhook deliveries to label/title rules."""
from __future__ import annotations

from typing import Any, Awaitable, Callable

import structlog

from . import rules
from .github.client import InstallationClient

logger = structlog.get_logger(__name__)

Rule = Callable[[dict[str, Any], InstallationClient], Awaitable[None]]

ROUTES: dict[tuple[str, str], Rule] = {
    ("pull_request", "opened"): rules.handle_opened,
    ("pull_request", "edited"): rules.handle_edited,
    ("pull_request", "reopened"): rules.handle_reopened,
    ("pull_request", "labeled"): rules.handle_labeled,
    ("pull_request", "unlabeled"): rules.handle_unlabeled,
    ("pull_request_review", "submitted"): rules.handle_review_submitted,
}


def resolve(event: str, action: str | None) -> Rule | None:
    """Return the rule for an (event, action) pair, or None if unhandled."""
    if action is None:
        return None
    return ROUTES.get((event, action))


async def dispatch(
    event: str, payload: dict[str, Any], client: InstallationClient
) -> str | None:
    """Run the matching rule and return its name.

    Unrecognised combinations are not an error: nothing runs and None is
    returned.
    """
    action = payload.get("action")
    rule = resolve(event, action)
    if rule is None:
        logger.debug("event_ignored", github_event=event, action=action)
        return None

    await rule(payload, client)
    logger.info("rule_applied", github_event=event, action=action, rule=rule.__name__)
    return rule.__name__
