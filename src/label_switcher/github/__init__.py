"""GitHub App integration: authentication, installation client and webhooks."""
from __future__ import annotations

from .app import GitHubApp
from .client import InstallationClient

__all__ = [
    "GitHubApp",
    "InstallationClient",
]
