"""A fake GitHub REST API served through ``httpx.MockTransport``, plus payload builders."""

from __future__ import annotations

from typing import Any

import httpx

from pr_tracker.github_client import GitHubClient

FAIL = object()  # route marker: raise a transport error for this path


class FakeGitHub:
    """Serves canned JSON per request path and records every request.

    Search routes are keyed by the author login found in the ``q`` parameter.
    A route value may be JSON data, an ``httpx.Response`` or ``FAIL``.
    """

    def __init__(
        self,
        search: dict[str, Any] | None = None,
        routes: dict[str, Any] | None = None,
    ) -> None:
        self.search = search or {}
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/search/issues":
            query = request.url.params["q"]
            author = next(
                part.split(":", 1)[1] for part in query.split() if part.startswith("author:")
            )
            value = self.search.get(author, {"total_count": 0, "items": []})
        else:
            value = self.routes.get(path)
            if value is None:
                return httpx.Response(404, json={"message": "Not Found"})

        if value is FAIL:
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(value, httpx.Response):
            return value
        return httpx.Response(200, json=value)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def client(self, **kwargs: Any) -> GitHubClient:
        return GitHubClient("test-token", transport=self.transport, **kwargs)


# ── Canned payload builders ────────────────────────────────────────────────

def search_item(
    number: int,
    author: str,
    repo: str = "widgets",
    title: str | None = None,
    closed_at: str | None = "2025-01-10T12:00:00Z",
) -> dict[str, Any]:
    return {
        "number": number,
        "title": title or f"PR #{number}",
        "user": {"login": author},
        "html_url": f"https://github.com/acme/{repo}/pull/{number}",
        "created_at": "2025-01-06T09:30:00Z",
        "closed_at": closed_at,
    }


def pull_detail(
    state: str = "closed",
    merged_at: str | None = "2025-01-10T12:00:00Z",
    head: str = "feature-x",
    base: str = "main",
    body: str | None = "Adds the thing.",
) -> dict[str, Any]:
    return {
        "state": state,
        "merged_at": merged_at,
        "head": {"ref": head},
        "base": {"ref": base},
        "body": body,
    }


def file_entry(filename: str, additions: int, deletions: int) -> dict[str, Any]:
    return {"filename": filename, "additions": additions, "deletions": deletions}
