"""Async GitHub REST client for search, PR detail and PR files."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import httpx

from pr_tracker.config import (
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    REQUEST_TIMEOUT,
    SEARCH_PER_PAGE,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


class GitHubAPIError(RuntimeError):
    """A request to the GitHub API failed in transport or returned non-2xx."""


class GitHubClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for the REST endpoints we use.

    Requests are never retried. When *max_concurrency* is set, at most that
    many requests are in flight at once; otherwise fan-out is unbounded.
    """

    def __init__(
        self,
        token: str,
        *,
        max_concurrency: int | None = None,
        base_url: str = GITHUB_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token:
            raise ValueError(
                "GITHUB_TOKEN is required. Set it as an environment variable."
            )
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "User-Agent": USER_AGENT,
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=REQUEST_TIMEOUT,
            transport=transport,
        )
        self._limiter = (
            asyncio.Semaphore(max_concurrency) if max_concurrency else None
        )

    # ── REST ────────────────────────────────────────────────────────────

    async def rest_get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a GET request and return the parsed JSON body.

        Raises ``GitHubAPIError`` on transport errors and non-2xx statuses.
        """
        limiter = self._limiter or contextlib.nullcontext()
        async with limiter:
            try:
                resp = await self._client.get(endpoint, params=params)
                resp.raise_for_status()
            except httpx.HTTPError as exc:
                raise GitHubAPIError(f"GET {endpoint} failed: {exc}") from exc

        remaining = resp.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            logger.debug("GET %s ok (rate limit remaining: %s)", endpoint, remaining)

        try:
            return resp.json()
        except ValueError as exc:
            raise GitHubAPIError(f"GET {endpoint} returned invalid JSON") from exc

    async def search_issues(self, query: str) -> Any:
        """Run one page of ``/search/issues`` for *query*."""
        return await self.rest_get(
            "/search/issues",
            params={"q": query, "per_page": SEARCH_PER_PAGE},
        )

    async def get_pull(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Fetch full detail (state, merge time, branch refs) for one PR."""
        return await self.rest_get(f"/repos/{owner}/{repo}/pulls/{number}")

    async def get_pull_files(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        """Fetch the first page of changed files for one PR.

        A response that is not a list is logged and treated as no files.
        """
        data = await self.rest_get(f"/repos/{owner}/{repo}/pulls/{number}/files")
        if not isinstance(data, list):
            logger.error("Invalid file response for %s/%s#%d", owner, repo, number)
            return []
        return data

    # ── Context manager ─────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
