"""Pydantic models describing the GitHub entities returned by the comment endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, HttpUrl


class GitHubUser(BaseModel):
    """Subset of GitHub user metadata attached to a comment."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    login: str
    avatar_url: HttpUrl | None = None
    html_url: HttpUrl | None = None
    type: str | None = None


class IssueComment(BaseModel):
    """Snapshot of a single comment on an issue or pull request."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    node_id: str | None = None
    url: HttpUrl | None = None
    html_url: HttpUrl | None = None
    issue_url: HttpUrl | None = None
    body: str = ""
    user: GitHubUser | None = None
    created_at: datetime
    updated_at: datetime
    author_association: str | None = None
