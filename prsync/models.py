"""
Data records shared by the push and pull request layers.

Local commits and their changes come from the local commit source;
everything prefixed Remote describes objects created on the host.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol


class FileMode(str, Enum):
    """Git tree entry modes accepted by the trees endpoint."""

    REGULAR = "100644"
    EXECUTABLE = "100755"
    TREE = "040000"
    SUBMODULE = "160000"
    SYMLINK = "120000"


class ChangeStatus(str, Enum):
    """Status letters as printed by `git diff-tree --raw`."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNKNOWN = "X"

    @property
    def requires_upload(self) -> bool:
        return self in (ChangeStatus.ADDED, ChangeStatus.MODIFIED)


@dataclass(frozen=True)
class Change:
    """A single path changed by a local commit."""

    path: str
    mode: FileMode
    status: ChangeStatus


@dataclass
class LocalCommit:
    """
    A local commit to replay on the host.

    `parents[0]` is the commit whose tree the changes apply to.
    """

    sha: str
    parents: list[str]
    tree: str
    subject: str
    body: str = ""
    changes: list[Change] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{self.subject}\n\n{self.body}"


@dataclass(frozen=True)
class RemoteTreeEntry:
    """One entry of a differential tree. A null sha removes the path."""

    path: str
    mode: FileMode
    sha: Optional[str]
    type: str = "blob"

    def to_payload(self) -> dict:
        return {
            "path": self.path,
            "mode": self.mode.value,
            "type": self.type,
            "sha": self.sha,
        }


@dataclass(frozen=True)
class RemoteCommitResult:
    """A commit object created on the host."""

    sha: str
    tree: str


@dataclass(frozen=True)
class FileAddition:
    path: str
    contents: str  # base64


@dataclass(frozen=True)
class FileDeletion:
    path: str


@dataclass
class BranchFileChangeSet:
    """Inline file changes for a single commit pushed through GraphQL."""

    additions: list[FileAddition] = field(default_factory=list)
    deletions: list[FileDeletion] = field(default_factory=list)

    def to_payload(self, include_contents: bool = True) -> dict:
        additions = []
        for addition in self.additions:
            item = {"path": addition.path}
            if include_contents:
                item["contents"] = addition.contents
            additions.append(item)
        return {
            "additions": additions,
            "deletions": [{"path": d.path} for d in self.deletions],
        }


@dataclass(frozen=True)
class SignedCommitResult:
    sha: str
    ref_name: str
    branch_created: bool


@dataclass(frozen=True)
class PullRequestRecord:
    """
    A pull request after reconciliation.

    `created` is False when an existing pull request was updated.
    """

    number: int
    html_url: str
    created: bool


def strip_org_prefix(team: str) -> str:
    """Turn "org/team-name" into "team-name"; bare names pass through."""
    return team.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ReviewerRequest:
    """User and team reviewers for one review request call."""

    reviewers: tuple[str, ...] = ()
    team_reviewers: tuple[str, ...] = ()

    @classmethod
    def from_names(cls, reviewers, team_reviewers) -> "ReviewerRequest":
        return cls(
            reviewers=tuple(reviewers),
            team_reviewers=tuple(strip_org_prefix(t) for t in team_reviewers),
        )

    def __bool__(self) -> bool:
        return bool(self.reviewers or self.team_reviewers)

    def to_kwargs(self) -> dict:
        kwargs = {}
        if self.reviewers:
            kwargs["reviewers"] = list(self.reviewers)
        if self.team_reviewers:
            kwargs["team_reviewers"] = list(self.team_reviewers)
        return kwargs


@dataclass
class PullRequestOptions:
    """Caller inputs for creating or updating a pull request."""

    branch: str
    base: str
    title: str
    body: str = ""
    draft: bool = False
    milestone: Optional[int] = None
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    reviewers: list[str] = field(default_factory=list)
    team_reviewers: list[str] = field(default_factory=list)

    @property
    def reviewer_request(self) -> ReviewerRequest:
        return ReviewerRequest.from_names(self.reviewers, self.team_reviewers)


class ContentReader(Protocol):
    """Supplies file bytes for a path as of a local commit."""

    def read_file(self, commit_sha: str, path: str) -> bytes:
        ...
