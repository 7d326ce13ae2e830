"""Webhook receiver for GitHub App events (FastAPI)."""
from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

import httpx
import structlog
from fastapi import FastAPI, Request, Response

from .. import __version__
from ..router import dispatch, resolve
from .app import GitHubApp

logger = structlog.get_logger(__name__)

SIGNATURE_HEADERS = ("X-Hub-Signature-256", "X-Hub-Signature")
EVENT_HEADER = "X-GitHub-Event"
MISSING_SIGNATURE = "sha1="


def verify_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """Verify a GitHub webhook HMAC signature.

    Args:
        payload: Raw request body bytes.
        signature: Header value of the form ``<algorithm>=<hexdigest>``,
            e.g. ``sha256=...`` or the legacy ``sha1=...``. None is treated
            as ``sha1=`` and never matches.
        secret: The webhook secret configured in the GitHub App.

    Returns:
        True if the digest matches, False otherwise (including unknown
        algorithms and malformed headers).
    """
    method, sep, their_digest = (signature or MISSING_SIGNATURE).partition("=")
    if not sep or not their_digest:
        return False
    try:
        mac = hmac.new(secret.encode(), payload, method)
    except (TypeError, ValueError):
        return False
    return hmac.compare_digest(mac.hexdigest().encode(), their_digest.encode())


def _signature_header(request: Request) -> str | None:
    for name in SIGNATURE_HEADERS:
        value = request.headers.get(name)
        if value is not None:
            return value
    return None


def _parse_payload(body: bytes) -> dict[str, Any]:
    """Decode the JSON body, falling back to an empty payload."""
    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("payload_not_json", size=len(body))
        return {}
    if not isinstance(payload, dict):
        logger.warning("payload_not_object", type=type(payload).__name__)
        return {}
    return payload


def create_app(github_app: GitHubApp) -> FastAPI:
    """Create a FastAPI application with webhook and health endpoints.

    Args:
        github_app: A configured GitHubApp, used for signature verification
            and per-delivery installation authentication.

    Returns:
        A FastAPI application.
    """
    app = FastAPI(title="label-switcher webhook", version=__version__)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/")
    async def webhook(request: Request) -> Response:
        """Receive a GitHub delivery and apply the matching rule."""
        body = await request.body()

        if not verify_signature(body, _signature_header(request), github_app.webhook_secret):
            logger.warning("signature_rejected")
            return Response(content="Unauthorized", status_code=401)

        event = request.headers.get(EVENT_HEADER, "")
        payload = _parse_payload(body)
        action = payload.get("action")
        logger.debug("webhook_received", github_event=event, action=action)

        if resolve(event, action) is None:
            logger.debug("event_ignored", github_event=event, action=action)
            return Response(content="ok", media_type="text/plain")

        try:
            client = await github_app.authenticate_installation(payload)
            async with client:
                await dispatch(event, payload, client)
        except (httpx.HTTPError, KeyError):
            logger.exception("delivery_failed", github_event=event, action=action)
            raise

        return Response(content="ok", media_type="text/plain")

    return app
