"""Label and title rules applied to pull-request webhook events.

Each rule reads what it needs from the payload, re-reads current labels
from GitHub when the decision depends on them, and issues at most two
mutations through the installation client.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .github.client import InstallationClient

REVIEW_REQUIRED_LABEL = "review-required"
CHANGES_REQUESTED_LABEL = "changes-requested"
WIP_LABEL = "WIP"

WIP_MARKER = "[WIP]"
WIP_PREFIX = "[WIP] "

CHANGES_REQUESTED_STATE = "changes_requested"


@dataclass
class PullRequestRef:
    """The repository, number and title of the PR an event is about."""

    repo: str
    number: int
    title: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PullRequestRef:
        pr = payload["pull_request"]
        return cls(
            repo=payload["repository"]["full_name"],
            number=pr["number"],
            title=pr["title"],
        )

    @property
    def is_wip(self) -> bool:
        return WIP_MARKER in self.title


async def handle_opened(payload: dict[str, Any], client: InstallationClient) -> None:
    """Add review-required, and WIP too when the title carries the marker."""
    pr = PullRequestRef.from_payload(payload)
    labels = [REVIEW_REQUIRED_LABEL]
    if pr.is_wip:
        labels.append(WIP_LABEL)
    await client.add_labels(pr.repo, pr.number, labels)


async def handle_edited(payload: dict[str, Any], client: InstallationClient) -> None:
    """Add WIP when the marker appears in the title, drop it when it goes away."""
    pr = PullRequestRef.from_payload(payload)
    current_labels = await client.labels_for_issue(pr.repo, pr.number)
    if pr.is_wip:
        if WIP_LABEL not in current_labels:
            await client.add_labels(pr.repo, pr.number, [WIP_LABEL])
    elif WIP_LABEL in current_labels:
        await client.remove_label(pr.repo, pr.number, WIP_LABEL)


async def handle_reopened(payload: dict[str, Any], client: InstallationClient) -> None:
    # Current labels are not consulted; GitHub treats a re-add as a no-op.
    pr = PullRequestRef.from_payload(payload)
    if pr.is_wip:
        await client.add_labels(pr.repo, pr.number, [WIP_LABEL])


async def handle_labeled(payload: dict[str, Any], client: InstallationClient) -> None:
    """Prefix the title with the marker when someone adds the WIP label."""
    pr = PullRequestRef.from_payload(payload)
    if payload["label"]["name"] == WIP_LABEL and not pr.is_wip:
        await client.update_pull_request(
            pr.repo, pr.number, title=WIP_PREFIX + pr.title
        )


async def handle_unlabeled(payload: dict[str, Any], client: InstallationClient) -> None:
    """Strip the marker from the title when someone removes the WIP label.

    Only the first literal ``"[WIP] "`` is removed, wherever it sits in the
    title; a bare ``"[WIP]"`` without the trailing space is left alone.
    """
    pr = PullRequestRef.from_payload(payload)
    if payload["label"]["name"] == WIP_LABEL and WIP_PREFIX in pr.title:
        await client.update_pull_request(
            pr.repo, pr.number, title=pr.title.replace(WIP_PREFIX, "", 1)
        )


async def handle_review_submitted(
    payload: dict[str, Any], client: InstallationClient
) -> None:
    """Swap review-required for changes-requested when a reviewer asks for changes."""
    if payload["review"]["state"] != CHANGES_REQUESTED_STATE:
        return

    pr = PullRequestRef.from_payload(payload)
    current_labels = await client.labels_for_issue(pr.repo, pr.number)
    await client.add_labels(pr.repo, pr.number, [CHANGES_REQUESTED_LABEL])
    if REVIEW_REQUIRED_LABEL in current_labels:
        await client.remove_label(pr.repo, pr.number, REVIEW_REQUIRED_LABEL)
