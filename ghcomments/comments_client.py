"""Request/response client for the GitHub issue comment endpoints."""

from typing import Any, Protocol, TypeVar, runtime_checkable
from collections.abc import AsyncIterator, Mapping

import httpx
from pydantic import BaseModel

from ghcomments import api_urls
from ghcomments.ensure import argument_not_none, argument_not_none_or_empty_string
from ghcomments.models import IssueComment

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class RequestConnectionProtocol(Protocol):
    """Connection behaviors the comments client relies on."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a single HTTP request."""
        ...

    def parse_json(self, response: httpx.Response) -> Any:
        """Decode a JSON response body."""
        ...

    def get_all_pages(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[ModelT]:
        """Yield every item of a paginated resource hydrated into ``model``."""
        ...


def since_params(since: str | None) -> dict[str, Any] | None:
    """Return the query parameters for an optional ``since`` filter."""
    return {"since": since} if since else None


class IssueCommentsClient:
    """Perform the HTTP calls behind each issue comment operation."""

    def __init__(self, connection: RequestConnectionProtocol) -> None:
        """Bind the client to an open GitHub connection."""
        argument_not_none(connection, "connection")
        self._connection = connection

    async def get(self, owner: str, repo: str, comment_id: int) -> IssueComment:
        """Fetch a single issue comment by its identifier."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        response = await self._connection.request("GET", api_urls.issue_comment(owner, repo, comment_id))
        return IssueComment.model_validate(self._connection.parse_json(response))

    async def get_all_for_repository(
        self,
        owner: str,
        repo: str,
        *,
        since: str | None = None,
    ) -> list[IssueComment]:
        """Return every issue comment in a repository."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        return [
            comment
            async for comment in self._connection.get_all_pages(
                api_urls.issue_comments(owner, repo),
                IssueComment,
                params=since_params(since),
            )
        ]

    async def get_all_for_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        since: str | None = None,
    ) -> list[IssueComment]:
        """Return every comment posted on one issue."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        return [
            comment
            async for comment in self._connection.get_all_pages(
                api_urls.issue_comments(owner, repo, number),
                IssueComment,
                params=since_params(since),
            )
        ]

    async def create(self, owner: str, repo: str, number: int, body: str) -> IssueComment:
        """Post a new comment on an issue."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        argument_not_none(body, "body")
        response = await self._connection.request(
            "POST",
            api_urls.issue_comments(owner, repo, number),
            json={"body": body},
        )
        return IssueComment.model_validate(self._connection.parse_json(response))

    async def update(self, owner: str, repo: str, comment_id: int, body: str) -> IssueComment:
        """Replace the body of an existing comment."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        argument_not_none(body, "body")
        response = await self._connection.request(
            "PATCH",
            api_urls.issue_comment(owner, repo, comment_id),
            json={"body": body},
        )
        return IssueComment.model_validate(self._connection.parse_json(response))

    async def delete(self, owner: str, repo: str, comment_id: int) -> None:
        """Delete an issue comment."""
        argument_not_none_or_empty_string(owner, "owner")
        argument_not_none_or_empty_string(repo, "repo")
        await self._connection.request("DELETE", api_urls.issue_comment(owner, repo, comment_id))
