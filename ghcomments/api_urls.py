"""Resource paths for the GitHub issue comment endpoints."""

from urllib.parse import quote


def _repository(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def issue_comments(owner: str, repo: str, number: int | None = None) -> str:
    """Return the comments path for a repository, or for one issue when ``number`` is given."""
    if number is None:
        return f"{_repository(owner, repo)}/issues/comments"
    return f"{_repository(owner, repo)}/issues/{number}/comments"


def issue_comment(owner: str, repo: str, comment_id: int) -> str:
    """Return the path of a single issue comment."""
    return f"{_repository(owner, repo)}/issues/comments/{comment_id}"
