"""Installation-scoped GitHub REST client for labels and PR titles."""
from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog

from ..config import DEFAULT_API_URL

logger = structlog.get_logger(__name__)


class InstallationClient:
    """Thin async wrapper over the issue-label and pull-request endpoints.

    One instance is bound to one installation access token and lives for a
    single webhook delivery. Every call raises on a non-2xx response.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._http = httpx.AsyncClient(headers=self._headers, timeout=15.0)

    async def __aenter__(self) -> InstallationClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _issue_labels_url(self, repo: str, number: int) -> str:
        return f"{self.api_url}/repos/{repo}/issues/{number}/labels"

    async def labels_for_issue(self, repo: str, number: int) -> list[str]:
        """Return the names of the labels currently on an issue or PR.

        Follows the ``Link: rel="next"`` header until every page is read.
        """
        names: list[str] = []
        url: str | None = self._issue_labels_url(repo, number)
        params: dict | None = {"per_page": 100}
        while url:
            resp = await self._http.get(url, params=params)
            resp.raise_for_status()
            names.extend(label["name"] for label in resp.json())
            url = resp.links.get("next", {}).get("url")
            params = None
        return names

    async def add_labels(self, repo: str, number: int, labels: list[str]) -> list[dict]:
        """Add labels in a single call. Re-adding a present label is a no-op on GitHub."""
        resp = await self._http.post(
            self._issue_labels_url(repo, number), json={"labels": list(labels)}
        )
        resp.raise_for_status()
        logger.info("labels_added", repo=repo, number=number, labels=list(labels))
        return resp.json()

    async def remove_label(self, repo: str, number: int, name: str) -> None:
        resp = await self._http.delete(
            f"{self._issue_labels_url(repo, number)}/{quote(name, safe='')}"
        )
        resp.raise_for_status()
        logger.info("label_removed", repo=repo, number=number, label=name)

    async def update_pull_request(self, repo: str, number: int, *, title: str) -> dict:
        """Update a pull request's title."""
        resp = await self._http.patch(
            f"{self.api_url}/repos/{repo}/pulls/{number}", json={"title": title}
        )
        resp.raise_for_status()
        logger.info("title_updated", repo=repo, number=number, title=title)
        return resp.json()
