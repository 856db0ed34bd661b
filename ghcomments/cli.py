"""Command-line entry point for the ghcomments tool."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Annotated, Any, NoReturn

import httpx
import orjson
import pendulum
import typer

from ghcomments.config import AppSettings, load_settings
from ghcomments.github_client import GitHubAPIError, GitHubClient, RateLimitError
from ghcomments.observable import ObservableIssueCommentsClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable


app = typer.Typer(add_completion=False, help="GitHub issue comment tooling.")

OwnerArg = Annotated[str, typer.Argument(help="Owner of the repository.")]
RepoArg = Annotated[str, typer.Argument(help="Name of the repository.")]
CommentIdArg = Annotated[int, typer.Argument(help="Identifier of the issue comment.")]
BodyOption = Annotated[str, typer.Option("--body", help="Markdown body of the comment.")]


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable verbose logging output.")] = False,
) -> None:
    """Configure logging before executing a sub-command."""
    _configure_logging(verbose)


@app.command()
def get(owner: OwnerArg, repo: RepoArg, comment_id: CommentIdArg) -> None:
    """Print a single issue comment."""
    _run(lambda comments: comments.get(owner, repo, comment_id))


@app.command(name="list")
def list_comments(
    owner: OwnerArg,
    repo: RepoArg,
    issue: Annotated[
        int | None,
        typer.Option("--issue", help="Only list comments on this issue number."),
    ] = None,
    since: Annotated[
        str | None,
        typer.Option("--since", help="Only list comments updated at or after this timestamp."),
    ] = None,
) -> None:
    """Print every comment of a repository or of a single issue as JSON lines."""
    normalized_since = _normalize_since(since)
    if issue is None:
        _run(lambda comments: comments.get_all_for_repository(owner, repo, since=normalized_since))
    else:
        _run(lambda comments: comments.get_all_for_issue(owner, repo, issue, since=normalized_since))


@app.command()
def create(
    owner: OwnerArg,
    repo: RepoArg,
    number: Annotated[int, typer.Argument(help="Issue number to comment on.")],
    body: BodyOption,
) -> None:
    """Create a comment on an issue and print it."""
    _run(lambda comments: comments.create(owner, repo, number, body))


@app.command()
def update(owner: OwnerArg, repo: RepoArg, comment_id: CommentIdArg, body: BodyOption) -> None:
    """Replace the body of an issue comment and print it."""
    _run(lambda comments: comments.update(owner, repo, comment_id, body))


@app.command()
def delete(owner: OwnerArg, repo: RepoArg, comment_id: CommentIdArg) -> None:
    """Delete an issue comment."""
    _run(lambda comments: comments.delete(owner, repo, comment_id))
    typer.echo(f"Deleted comment {comment_id} from {owner}/{repo}")


@app.command()
def doctor() -> None:
    """Validate configuration and verify GitHub API connectivity."""
    try:
        settings = load_settings()
    except ValueError as exc:
        _handle_settings_error(exc)
    typer.echo(f"Loaded configuration for API: {settings.github_api_base}")
    asyncio.run(_doctor(settings))


async def _doctor(settings: AppSettings) -> None:
    try:
        async with GitHubClient(settings) as client:
            response = await client.request("GET", "/user")
            payload = client.parse_json(response)
    except Exception as exc:  # pragma: no cover - direct user feedback
        typer.echo(f"Failed to reach GitHub API: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Authenticated as: {payload.get('login', 'unknown')}")


def _run(factory: Callable[[ObservableIssueCommentsClient], AsyncIterator[Any]]) -> None:
    try:
        settings = load_settings()
    except ValueError as exc:
        _handle_settings_error(exc)
    try:
        asyncio.run(_emit(settings, factory))
    except (ValueError, GitHubAPIError, RateLimitError, httpx.HTTPError) as exc:
        _handle_request_error(exc)


async def _emit(
    settings: AppSettings,
    factory: Callable[[ObservableIssueCommentsClient], AsyncIterator[Any]],
) -> None:
    async with GitHubClient(settings) as client:
        comments = ObservableIssueCommentsClient(client)
        async for comment in factory(comments):
            typer.echo(orjson.dumps(comment.model_dump(mode="json")).decode())


def _normalize_since(since: str | None) -> str | None:
    if not since:
        return None
    try:
        parsed = pendulum.parse(since)
    except ValueError as exc:
        raise typer.BadParameter(f"Unrecognized timestamp: {since}", param_hint="--since") from exc
    if not isinstance(parsed, pendulum.DateTime):
        raise typer.BadParameter(f"Expected a date or datetime: {since}", param_hint="--since")
    return parsed.in_timezone("UTC").to_iso8601_string()


def _handle_settings_error(exc: ValueError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _handle_request_error(exc: Exception) -> NoReturn:
    typer.secho(f"Request failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
