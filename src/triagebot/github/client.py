"""GitHubClient - GraphQL access to pull requests and the project board."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from triagebot.executor.models import Mutation
from triagebot.github.exceptions import ProjectNotFoundError, TransportError
from triagebot.github.models import Card, CardPR, OpenPullRequests, ProjectColumn
from triagebot.logging import sanitize_for_log
from triagebot.pr_info.models import parse_time

logger = logging.getLogger("triagebot.github")

OPEN_PRS_QUERY = """
query($owner: String!, $repo: String!, $cursor: String) {
    repository(owner: $owner, name: $repo) {
        pullRequests(states: OPEN, first: 100, after: $cursor,
                     orderBy: {field: CREATED_AT, direction: ASC}) {
            pageInfo {
                hasNextPage
                endCursor
            }
            nodes {
                number
                projectCards(first: 10) {
                    nodes {
                        id
                        project {
                            number
                        }
                    }
                }
            }
        }
    }
}
"""

PR_QUERY = """
query($owner: String!, $repo: String!, $number: Int!, $projectNumber: Int!) {
    repository(owner: $owner, name: $repo) {
        pullRequest(number: $number) {
            id
            number
            title
            url
            state
            isDraft
            mergeable
            createdAt
            additions
            deletions
            authorAssociation
            author {
                login
            }
            labels(first: 100) {
                nodes {
                    name
                }
            }
            comments(last: 100) {
                nodes {
                    id
                    body
                    createdAt
                    author {
                        login
                    }
                }
            }
            reviews(last: 100) {
                nodes {
                    state
                    submittedAt
                    authorAssociation
                    author {
                        login
                    }
                    commit {
                        oid
                    }
                }
            }
            commits(last: 1) {
                nodes {
                    commit {
                        oid
                        committedDate
                        pushedDate
                        statusCheckRollup {
                            state
                        }
                    }
                }
            }
            projectCards(first: 10) {
                nodes {
                    id
                    project {
                        number
                    }
                    column {
                        name
                    }
                }
            }
        }
        labels(first: 100) {
            nodes {
                id
                name
            }
        }
        project(number: $projectNumber) {
            number
            columns(first: 30) {
                nodes {
                    id
                    name
                }
            }
        }
    }
}
"""

COLUMNS_QUERY = """
query($owner: String!, $repo: String!, $projectNumber: Int!) {
    repository(owner: $owner, name: $repo) {
        project(number: $projectNumber) {
            columns(first: 30) {
                nodes {
                    id
                    name
                    cards(first: 100, archivedStates: NOT_ARCHIVED) {
                        totalCount
                        nodes {
                            id
                            updatedAt
                            content {
                                ... on PullRequest {
                                    number
                                }
                            }
                        }
                    }
                }
            }
        }
    }
}
"""

CARD_QUERY = """
query($id: ID!) {
    node(id: $id) {
        ... on ProjectCard {
            content {
                ... on PullRequest {
                    number
                    state
                }
            }
        }
    }
}
"""


class GitHubClient:
    """GitHub GraphQL client for one repository and its (classic) project board.

    Implements the fetch, resolve and mutation-submission operations the
    triage pipeline consumes. Every call is synchronous; failures surface as
    TransportError and are never retried here.
    """

    def __init__(
        self,
        repo: str,
        project_number: int,
        token: str,
        base_url: str = "https://api.github.com/graphql",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            repo: GitHub repo in "owner/repo" format
            project_number: Number of the repository project board
            token: GitHub token with repo and project scope
            base_url: GitHub GraphQL API URL (for testing/enterprise)
            timeout: HTTP timeout in seconds
        """
        self.repo = repo
        self.owner, self.repo_name = repo.split("/")
        self.project_number = project_number
        self.token = token
        self.base_url = base_url
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for GraphQL API."""
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL request.

        Args:
            query: GraphQL query or mutation string
            variables: Request variables

        Returns:
            Response data

        Raises:
            TransportError: If the request fails
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.client.post(self.base_url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"GraphQL request failed: {sanitize_for_log(str(e))}") from e

        if response.status_code != 200:
            raise TransportError(
                f"GraphQL request failed: {response.status_code} - "
                f"{sanitize_for_log(response.text)}"
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise TransportError(
                f"GraphQL response is not JSON: {sanitize_for_log(response.text[:200])}"
            ) from e
        if not isinstance(data, dict):
            raise TransportError(f"GraphQL response is not an object: {str(data)[:200]}")
        if data.get("errors"):
            raise TransportError(f"GraphQL errors: {data['errors']}")
        if not isinstance(data.get("data"), dict):
            raise TransportError(f"GraphQL response has no data: {str(data)[:200]}")

        return dict(data["data"])

    def fetch_open_prs_and_card_ids(self) -> OpenPullRequests:
        """Get every open PR number and the ids of their cards on the board."""
        result = OpenPullRequests()
        cursor: str | None = None
        while True:
            data = self._graphql(
                OPEN_PRS_QUERY,
                {"owner": self.owner, "repo": self.repo_name, "cursor": cursor},
            )
            page = (data.get("repository") or {}).get("pullRequests") or {}
            for node in page.get("nodes", []):
                result.numbers.append(node["number"])
                for card in (node.get("projectCards") or {}).get("nodes", []):
                    if (card.get("project") or {}).get("number") == self.project_number:
                        result.card_ids.add(card["id"])

            page_info = page.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info["endCursor"]

        logger.debug(
            "Found %d open PR(s) with %d card(s)", len(result.numbers), len(result.card_ids)
        )
        return result

    def fetch_pr_info(self, number: int) -> dict[str, Any]:
        """Get the raw query result for one PR.

        Returns:
            GraphQL data; ``result["repository"]["pullRequest"]`` is None when
            no PR with this number exists.
        """
        return self._graphql(
            PR_QUERY,
            {
                "owner": self.owner,
                "repo": self.repo_name,
                "number": number,
                "projectNumber": self.project_number,
            },
        )

    def fetch_project_columns(self) -> list[ProjectColumn]:
        """Get the board columns with their cards.

        Raises:
            ProjectNotFoundError: If the project board doesn't exist.
        """
        data = self._graphql(
            COLUMNS_QUERY,
            {
                "owner": self.owner,
                "repo": self.repo_name,
                "projectNumber": self.project_number,
            },
        )
        project = (data.get("repository") or {}).get("project")
        if not project:
            raise ProjectNotFoundError(f"Project #{self.project_number} not found in {self.repo}")

        columns = []
        for node in project["columns"]["nodes"]:
            cards_data = node.get("cards") or {}
            cards = [
                Card(
                    id=card["id"],
                    updated_at=parse_time(card["updatedAt"]),
                    pr_number=(card.get("content") or {}).get("number"),
                )
                for card in cards_data.get("nodes", [])
            ]
            columns.append(
                ProjectColumn(
                    id=node["id"],
                    name=node["name"],
                    cards=cards,
                    total_count=cards_data.get("totalCount", len(cards)),
                )
            )
        return columns

    def resolve_pr_for_card_id(self, card_id: str) -> CardPR | None:
        """Find the PR a card links to, or None if it cannot be resolved."""
        data = self._graphql(CARD_QUERY, {"id": card_id})
        content = (data.get("node") or {}).get("content") or {}
        if "number" not in content or "state" not in content:
            return None
        return CardPR(number=content["number"], state=content["state"])

    def submit_mutation(self, mutation: Mutation) -> None:
        """Submit one mutation.

        Raises:
            TransportError: If the mutation fails
        """
        self._graphql(mutation.document, {"input": mutation.input})

    def delete_card(self, card_id: str) -> None:
        """Delete a card from the board."""
        logger.debug("Deleting card %s", card_id)
        self.submit_mutation(Mutation("deleteProjectCard", {"cardId": card_id}))
