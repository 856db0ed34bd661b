"""Tests for the request/response issue comments client."""

from typing import TYPE_CHECKING

import orjson
import pytest
from httpx import Response

from ghcomments.comments_client import IssueCommentsClient
from ghcomments.ensure import InvalidArgumentError
from ghcomments.github_client import GitHubClient
from tests.factories import comment_page, comment_payload

if TYPE_CHECKING:
    from ghcomments.config import AppSettings
    from respx import MockRouter

REPO_URL = "https://api.github.example.com/repos/octokit/octokit.net"


@pytest.mark.asyncio
async def test_get_fetches_single_comment(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """get should hit the single comment endpoint and hydrate the model."""
    respx_mock.get(f"{REPO_URL}/issues/comments/1").mock(return_value=Response(200, json=comment_payload(1)))
    async with GitHubClient(settings) as connection:
        comment = await IssueCommentsClient(connection).get("octokit", "octokit.net", 1)

    assert comment.id == 1
    assert comment.user is not None
    assert comment.user.login == "alice"


@pytest.mark.asyncio
async def test_get_all_for_repository_forwards_since(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """Repository listing should pass the since filter and per_page."""
    route = respx_mock.get(
        f"{REPO_URL}/issues/comments",
        params={"since": "2024-01-01T00:00:00Z", "per_page": "30"},
    ).mock(return_value=Response(200, json=comment_page(1, 3)))
    async with GitHubClient(settings) as connection:
        comments = await IssueCommentsClient(connection).get_all_for_repository(
            "octokit",
            "octokit.net",
            since="2024-01-01T00:00:00Z",
        )

    assert [comment.id for comment in comments] == [1, 2, 3]
    assert route.called


@pytest.mark.asyncio
async def test_get_all_for_issue_collects_every_page(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """Issue listing should gather comments from every page."""
    url = f"{REPO_URL}/issues/42/comments"
    route = respx_mock.get(url)
    route.side_effect = [
        Response(200, json=comment_page(1, 2), headers={"Link": f'<{url}?page=2>; rel="next"'}),
        Response(200, json=comment_page(3, 2)),
    ]
    async with GitHubClient(settings) as connection:
        comments = await IssueCommentsClient(connection).get_all_for_issue("octokit", "octokit.net", 42)

    assert [comment.id for comment in comments] == [1, 2, 3, 4]
    assert route.call_count == 2


@pytest.mark.asyncio
async def test_create_posts_body(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """create should POST the body to the issue comments endpoint."""
    route = respx_mock.post(f"{REPO_URL}/issues/42/comments").mock(
        return_value=Response(201, json=comment_payload(99, body="Thanks!")),
    )
    async with GitHubClient(settings) as connection:
        comment = await IssueCommentsClient(connection).create("octokit", "octokit.net", 42, "Thanks!")

    assert comment.id == 99
    assert orjson.loads(route.calls.last.request.content) == {"body": "Thanks!"}


@pytest.mark.asyncio
async def test_update_patches_body(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """update should PATCH the single comment endpoint."""
    route = respx_mock.patch(f"{REPO_URL}/issues/comments/5").mock(
        return_value=Response(200, json=comment_payload(5, body="")),
    )
    async with GitHubClient(settings) as connection:
        comment = await IssueCommentsClient(connection).update("octokit", "octokit.net", 5, "")

    assert comment.body == ""
    assert orjson.loads(route.calls.last.request.content) == {"body": ""}


@pytest.mark.asyncio
async def test_delete_issues_delete_request(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """delete should succeed on an empty 204 response."""
    route = respx_mock.delete(f"{REPO_URL}/issues/comments/5").mock(return_value=Response(204))
    async with GitHubClient(settings) as connection:
        result = await IssueCommentsClient(connection).delete("octokit", "octokit.net", 5)

    assert result is None
    assert route.called


@pytest.mark.asyncio
async def test_create_rejects_missing_body(settings: "AppSettings", respx_mock: "MockRouter") -> None:
    """A None body should be rejected before any request."""
    async with GitHubClient(settings) as connection:
        with pytest.raises(InvalidArgumentError) as excinfo:
            await IssueCommentsClient(connection).create("octokit", "octokit.net", 42, None)  # type: ignore[arg-type]

    assert excinfo.value.argument == "body"
    assert not respx_mock.calls


def test_client_requires_connection() -> None:
    """The client cannot be built without a connection."""
    with pytest.raises(InvalidArgumentError):
        IssueCommentsClient(None)  # type: ignore[arg-type]
