"""
Error types and host error classification.

Classification looks at structured data first (HTTP status, GraphQL error
type). Matching on message text is confined to `error_messages` callers
below, for failures GitHub only reports in prose.
"""

from typing import Iterator

from github import GithubException, UnknownObjectException


PULL_REQUEST_EXISTS = "A pull request already exists for"
REVIEWER_TOKEN_SCOPE = "Could not resolve to a node with the global id of"
STALE_HEAD = "Expected branch to point to"


class SyncError(Exception):
    """Base class for failures raised by prsync itself."""


class RefNotFoundError(SyncError):
    """A ref required as a starting point does not exist."""


class RefUpdateError(SyncError):
    """Creating or advancing a branch ref was rejected."""


class StaleHeadError(SyncError):
    """The branch moved past the expected head before the commit landed."""

    def __init__(self, branch: str, expected_head: str):
        super().__init__(
            f"Branch '{branch}' no longer points to {expected_head}; "
            "fetch the new head and retry"
        )
        self.branch = branch
        self.expected_head = expected_head


class PullRequestError(SyncError):
    """The pull request could not be created or found."""


def _graphql_errors(exc: GithubException) -> list[dict]:
    data = exc.data if isinstance(exc.data, dict) else {}
    errors = data.get("errors") or []
    return [e for e in errors if isinstance(e, dict)]


def error_messages(exc: Exception) -> Iterator[str]:
    """Yield every human readable message carried by an exception."""
    if isinstance(exc, GithubException):
        data = exc.data if isinstance(exc.data, dict) else {}
        if data.get("message"):
            yield str(data["message"])
        for error in _graphql_errors(exc):
            if error.get("message"):
                yield str(error["message"])
    yield str(exc)


def _mentions(exc: Exception, text: str) -> bool:
    return any(text in message for message in error_messages(exc))


def is_not_found(exc: Exception) -> bool:
    if isinstance(exc, UnknownObjectException):
        return True
    return isinstance(exc, GithubException) and exc.status == 404


def is_pull_request_exists(exc: Exception) -> bool:
    if not isinstance(exc, GithubException) or exc.status != 422:
        return False
    return _mentions(exc, PULL_REQUEST_EXISTS)


def is_reviewer_scope_error(exc: Exception) -> bool:
    return _mentions(exc, REVIEWER_TOKEN_SCOPE)


def is_stale_head(exc: Exception) -> bool:
    if not isinstance(exc, GithubException):
        return False
    if any(e.get("type") == "STALE_DATA" for e in _graphql_errors(exc)):
        return True
    return _mentions(exc, STALE_HEAD)
