"""GitHub App configuration and JWT authentication."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import httpx
import jwt
import structlog
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from ..config import DEFAULT_API_URL, Config
from .client import InstallationClient

logger = structlog.get_logger(__name__)

JWT_TTL_SECONDS = 10 * 60


class GitHubApp:
    """GitHub App authentication manager.

    Handles JWT generation (RS256) and installation token exchange.
    Nothing is cached between calls: every webhook delivery mints a new
    JWT and a new installation token.
    """

    def __init__(
        self,
        app_id: str,
        private_key: str = "",
        private_key_path: str = "",
        webhook_secret: str = "",
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self.app_id = app_id
        self.private_key = private_key
        self.private_key_path = private_key_path
        self.webhook_secret = webhook_secret
        self.api_url = api_url.rstrip("/")

    @classmethod
    def from_config(cls, config: Config) -> GitHubApp:
        return cls(
            app_id=config.app_id,
            private_key=config.private_key,
            private_key_path=config.private_key_path,
            webhook_secret=config.webhook_secret,
            api_url=config.api_url,
        )

    def _load_private_key(self) -> bytes:
        """Return the PEM-encoded RSA private key.

        Inline PEM text wins over the key file path.

        Raises:
            FileNotFoundError: If the key file does not exist.
            ValueError: If no key is configured or it is not a valid PEM key.
        """
        if self.private_key.strip():
            pem_data = self.private_key.encode()
        elif self.private_key_path:
            key_path = Path(self.private_key_path)
            if not key_path.exists():
                raise FileNotFoundError(
                    f"GitHub App private key not found at: {self.private_key_path}"
                )
            pem_data = key_path.read_bytes()
        else:
            raise ValueError("No GitHub App private key configured")

        load_pem_private_key(pem_data, password=None)
        return pem_data

    def generate_jwt(self) -> str:
        """Create a JWT for GitHub App authentication.

        Claims are ``iat`` (now), ``exp`` (ten minutes later) and ``iss``
        (the app identifier), signed with RS256.

        Raises:
            ValueError: If app_id is empty or the key is missing/invalid.
            FileNotFoundError: If the private key file is missing.
        """
        if not self.app_id:
            raise ValueError("GITHUB_APP_IDENTIFIER is required to generate a JWT")

        private_key = self._load_private_key()
        now = int(time.time())
        payload = {
            "iat": now,
            "exp": now + JWT_TTL_SECONDS,
            "iss": self.app_id,
        }
        return jwt.encode(payload, private_key, algorithm="RS256")

    async def create_installation_token(self, installation_id: int) -> str:
        """Exchange a freshly minted JWT for an installation access token.

        Raises:
            httpx.HTTPStatusError: If GitHub rejects the request.
        """
        app_jwt = self.generate_jwt()
        async with httpx.AsyncClient(timeout=15.0) as client:
            resp = await client.post(
                f"{self.api_url}/app/installations/{installation_id}/access_tokens",
                headers={
                    "Authorization": f"Bearer {app_jwt}",
                    "Accept": "application/vnd.github+json",
                },
            )
            resp.raise_for_status()
            return resp.json()["token"]

    async def authenticate_installation(
        self, payload: dict[str, Any]
    ) -> InstallationClient:
        """Build a client scoped to the installation that sent ``payload``.

        Raises:
            KeyError: If the payload carries no ``installation.id``.
        """
        installation_id = payload["installation"]["id"]
        token = await self.create_installation_token(installation_id)
        logger.debug("installation_authenticated", installation_id=installation_id)
        return InstallationClient(token, api_url=self.api_url)
