from __future__ import annotations

import json
import logging
from datetime import datetime

import httpx

from deprecation_crawler.domain.entities import RepositoryInfo
from deprecation_crawler.domain.errors import RepositoryLookupError
from deprecation_crawler.domain.interfaces import IRepositoryLookup

log = logging.getLogger(__name__)

GITHUB_API_URL  = "https://api.github.com/graphql"
REQUEST_TIMEOUT = 30.0
USER_AGENT      = "deprecation-crawler"

REPOSITORY_QUERY = """
query RepositoryInfo($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    nameWithOwner
    description
    stargazerCount
    forkCount
    url
    isArchived
    isFork
    createdAt
    updatedAt
  }
}
"""


class GitHubClient(IRepositoryLookup):
    """
    Concrete implementation of IRepositoryLookup for GitHub's GraphQL API.

    The constructor receives an httpx.AsyncClient (injected) rather than
    creating one internally. Every way a lookup can go wrong (HTTP status,
    transport error, GraphQL errors, missing repository) comes out as a
    RepositoryLookupError.
    """

    def __init__(self, token: str, client: httpx.AsyncClient) -> None:
        self._client = client
        self._headers = {
            "Authorization": f"bearer {token}",
            "Content-Type":  "application/json",
            "User-Agent":    USER_AGENT,
        }

    # Anti-Corruption Layer
    @staticmethod
    def _parse_datetime(value: str | None) -> datetime | None:
        """Convert GitHub's ISO datetime string to Python datetime."""
        if not value:
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    def _parse_node(self, node: dict) -> RepositoryInfo:
        """
        Translate GitHub's raw repository object into RepositoryInfo.

        GitHub sends:          We store as:
          "nameWithOwner"   →  name_with_owner
          "stargazerCount"  →  star_count etc.
        """
        return RepositoryInfo(
            name_with_owner = node["nameWithOwner"],
            description     = node.get("description"),
            star_count      = node.get("stargazerCount", 0),
            fork_count      = node.get("forkCount", 0),
            url             = node["url"],
            is_archived     = node.get("isArchived", False),
            is_fork         = node.get("isFork", False),
            created_at      = self._parse_datetime(node.get("createdAt")),
            updated_at      = self._parse_datetime(node.get("updatedAt")),
        )

    async def _post(self, owner: str, name: str) -> dict:
        try:
            response = await self._client.post(
                GITHUB_API_URL,
                headers=self._headers,
                json={"query": REPOSITORY_QUERY, "variables": {"owner": owner, "name": name}},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise RepositoryLookupError(
                owner, name,
                f"GitHub API error: {exc.response.status_code} {exc.response.text[:200]}",
            ) from exc
        except httpx.RequestError as exc:
            raise RepositoryLookupError(owner, name, f"request error: {exc!r}") from exc
        except ValueError as exc:
            raise RepositoryLookupError(owner, name, f"invalid JSON body: {exc}") from exc

    # IRepositoryLookup implementation
    async def fetch_repository_info(self, owner: str, name: str) -> RepositoryInfo:
        data = await self._post(owner, name)
        if not isinstance(data, dict):
            raise RepositoryLookupError(owner, name, "unexpected response body")

        # GraphQL-level errors arrive with HTTP 200
        if data.get("errors"):
            raise RepositoryLookupError(
                owner, name, f"GraphQL errors: {json.dumps(data['errors'])}"
            )

        node = (data.get("data") or {}).get("repository")
        if not node:
            raise RepositoryLookupError(owner, name, "repository not found")

        try:
            info = self._parse_node(node)
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryLookupError(owner, name, f"malformed repository node: {exc}") from exc

        log.debug("Looked up %s (%d stars)", info.name_with_owner, info.star_count)
        return info
