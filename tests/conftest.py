"""Shared pytest fixtures for label-switcher test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from label_switcher.github.client import InstallationClient


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """A throwaway RSA key shared by the whole session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    """PEM text of the session RSA key."""
    return rsa_private_key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    ).decode()


@pytest.fixture()
def pr_payload() -> callable:
    """Factory fixture for pull_request / pull_request_review payloads."""

    def _factory(
        action: str = "opened",
        title: str = "Fix bug",
        label: str | None = None,
        review_state: str | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "action": action,
            "repository": {"full_name": "owner/repo"},
            "pull_request": {"number": 42, "title": title},
            "installation": {"id": 1234},
        }
        if label is not None:
            payload["label"] = {"name": label}
        if review_state is not None:
            payload["review"] = {"state": review_state}
        payload.update(overrides)
        return payload

    return _factory


@pytest.fixture()
def fake_client() -> callable:
    """Factory for an AsyncMock InstallationClient with preset current labels."""

    def _factory(current_labels: list[str] | None = None) -> AsyncMock:
        client = AsyncMock(spec=InstallationClient)
        client.labels_for_issue.return_value = list(current_labels or [])
        return client

    return _factory
