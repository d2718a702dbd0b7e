"""
One entry point wiring the push and pull request components to a single
authenticated client.
"""

from typing import Optional, Sequence

from github import Github

from prsync.config import DEFAULT_MAX_WORKERS, HostConfig
from prsync.github.client import get_github_client
from prsync.github.objects import CommitObjectBuilder
from prsync.github.pr import PullRequestReconciler
from prsync.github.push import SequentialCommitPusher
from prsync.github.refs import RefReconciler
from prsync.github.repository import RepositoryRef
from prsync.github.signed import AtomicSignedCommitPusher
from prsync.models import (
    BranchFileChangeSet,
    ContentReader,
    LocalCommit,
    PullRequestOptions,
    PullRequestRecord,
    RemoteCommitResult,
    SignedCommitResult,
)


class GitHubHelper:
    def __init__(
        self,
        config: Optional[HostConfig] = None,
        gh: Optional[Github] = None,
        verbose: bool = False,
    ):
        if config is None and gh is None:
            config = HostConfig.from_env()
        self.gh = gh or get_github_client(config)
        max_workers = config.max_workers if config else DEFAULT_MAX_WORKERS

        self.refs = RefReconciler(self.gh, verbose=verbose)
        self.objects = CommitObjectBuilder(self.gh, max_workers=max_workers, verbose=verbose)
        self.sequential = SequentialCommitPusher(
            self.gh, builder=self.objects, refs=self.refs, verbose=verbose
        )
        self.signed = AtomicSignedCommitPusher(self.gh, verbose=verbose)
        self.pulls = PullRequestReconciler(self.gh, verbose=verbose)

    def push_signed_commits(
        self,
        commits: Sequence[LocalCommit],
        reader: ContentReader,
        branch_repository: str,
        branch: str,
    ) -> list[RemoteCommitResult]:
        return self.sequential.push(commits, RepositoryRef.parse(branch_repository), branch, reader)

    def push_signed_commit(
        self,
        branch_repository: str,
        branch: str,
        base: str,
        commit_message: str,
        changes: BranchFileChangeSet,
    ) -> SignedCommitResult:
        return self.signed.push(
            RepositoryRef.parse(branch_repository), branch, base, commit_message, changes
        )

    def create_or_update_pull_request(
        self,
        options: PullRequestOptions,
        base_repository: str,
        head_repository: str,
    ) -> PullRequestRecord:
        return self.pulls.create_or_update_pull_request(options, base_repository, head_repository)

    def get_repository_parent(self, repository: str) -> Optional[str]:
        return self.pulls.get_repository_parent(repository)
