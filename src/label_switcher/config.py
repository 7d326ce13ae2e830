"""Configuration and environment management."""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PORT = 3000


def _read_private_key() -> str:
    """Read the PEM key from the environment.

    The key is usually exported on a single line with newlines replaced by
    the literal two characters ``\\n``; those are turned back into newlines.
    """
    return os.getenv("GITHUB_PRIVATE_KEY", "").replace("\\n", "\n")


def _read_app_id() -> str:
    return os.getenv("GITHUB_APP_IDENTIFIER") or os.getenv("GITHUB_APP_ID", "")


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # GitHub App
    app_id: str = field(default_factory=_read_app_id)
    private_key: str = field(default_factory=_read_private_key)
    private_key_path: str = field(
        default_factory=lambda: os.getenv("GITHUB_PRIVATE_KEY_PATH", "")
    )
    webhook_secret: str = field(
        default_factory=lambda: os.getenv("GITHUB_WEBHOOK_SECRET", "")
    )
    api_url: str = field(
        default_factory=lambda: os.getenv("GITHUB_API_URL", DEFAULT_API_URL)
    )

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(
        default_factory=lambda: int(os.getenv("PORT", str(DEFAULT_PORT)))
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key.strip() or self.private_key_path)

    def validate(self) -> list[str]:
        """Validate configuration, return list of issues."""
        issues = []
        if not self.app_id:
            issues.append("GITHUB_APP_IDENTIFIER is required to sign app JWTs")
        if not self.has_private_key:
            issues.append(
                "GITHUB_PRIVATE_KEY or GITHUB_PRIVATE_KEY_PATH is required"
            )
        if not self.webhook_secret:
            issues.append(
                "GITHUB_WEBHOOK_SECRET is required to verify webhook deliveries"
            )
        return issues
