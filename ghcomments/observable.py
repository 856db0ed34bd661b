"""Stream facade over the GitHub issue comment endpoints."""

from typing import Any, Protocol, TypeVar
from collections.abc import AsyncIterator, Mapping

from pydantic import BaseModel

from ghcomments import api_urls
from ghcomments.comments_client import IssueCommentsClient, RequestConnectionProtocol, since_params
from ghcomments.ensure import InvalidArgumentError, argument_not_none, argument_not_none_or_empty_string
from ghcomments.models import IssueComment
from ghcomments.streams import empty, single

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConnectionProtocol(Protocol):
    """Protocol capturing the pagination behavior used by the facade."""

    def get_all_pages(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[ModelT]:
        """Yield every item of a paginated resource hydrated into ``model``."""
        ...


class CommentsClientProtocol(Protocol):
    """Protocol capturing the single-result calls used by the facade."""

    async def get(self, owner: str, repo: str, comment_id: int) -> IssueComment:
        """Fetch one comment."""
        ...

    async def create(self, owner: str, repo: str, number: int, body: str) -> IssueComment:
        """Create a comment on an issue."""
        ...

    async def update(self, owner: str, repo: str, comment_id: int, body: str) -> IssueComment:
        """Update the body of a comment."""
        ...

    async def delete(self, owner: str, repo: str, comment_id: int) -> None:
        """Delete a comment."""
        ...


class ObservableIssueCommentsClient:
    """Expose issue comment operations as lazily started async streams.

    Every method validates its arguments immediately and raises
    :class:`~ghcomments.ensure.InvalidArgumentError` before any I/O. The
    returned stream performs its request only once it is iterated; request
    failures are raised from the iteration unchanged.
    """

    def __init__(
        self,
        connection: ConnectionProtocol,
        *,
        comments_client: CommentsClientProtocol | None = None,
    ) -> None:
        """Wrap a GitHub connection and the comments client bound to it."""
        argument_not_none(connection, "connection")
        self._connection = connection
        if comments_client is None:
            if not isinstance(connection, RequestConnectionProtocol):
                raise InvalidArgumentError(
                    "connection",
                    "A connection without request/parse_json needs an explicit comments_client",
                )
            comments_client = IssueCommentsClient(connection)
        self._client = comments_client

    def get(self, owner: str, repo: str, comment_id: int) -> AsyncIterator[IssueComment]:
        """Stream the single comment identified by ``comment_id``."""
        _ensure_repository(owner, repo)
        return single(self._client.get, owner, repo, comment_id)

    def get_all_for_repository(
        self,
        owner: str,
        repo: str,
        *,
        since: str | None = None,
    ) -> AsyncIterator[IssueComment]:
        """Stream every issue comment in a repository across all pages."""
        _ensure_repository(owner, repo)
        return self._connection.get_all_pages(
            api_urls.issue_comments(owner, repo),
            IssueComment,
            params=since_params(since),
        )

    def get_all_for_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        since: str | None = None,
    ) -> AsyncIterator[IssueComment]:
        """Stream every comment on issue ``number`` across all pages."""
        _ensure_repository(owner, repo)
        return self._connection.get_all_pages(
            api_urls.issue_comments(owner, repo, number),
            IssueComment,
            params=since_params(since),
        )

    def create(self, owner: str, repo: str, number: int, body: str) -> AsyncIterator[IssueComment]:
        """Stream the comment created on issue ``number``."""
        _ensure_repository(owner, repo)
        argument_not_none(body, "body")
        return single(self._client.create, owner, repo, number, body)

    def update(self, owner: str, repo: str, comment_id: int, body: str) -> AsyncIterator[IssueComment]:
        """Stream the comment after replacing its body."""
        _ensure_repository(owner, repo)
        argument_not_none(body, "body")
        return single(self._client.update, owner, repo, comment_id, body)

    def delete(self, owner: str, repo: str, comment_id: int) -> AsyncIterator[None]:
        """Return a stream that completes without values once the comment is deleted."""
        _ensure_repository(owner, repo)
        return empty(self._client.delete, owner, repo, comment_id)


def _ensure_repository(owner: str, repo: str) -> None:
    argument_not_none_or_empty_string(owner, "owner")
    argument_not_none_or_empty_string(repo, "repo")
