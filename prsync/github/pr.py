"""
Pull Request reconciliation for prsync.

Creates the pull request for a branch, or updates the one that is already
open, then applies milestone, labels, assignees and reviewers.
"""

from typing import Optional

from github import Github, GithubException
from github.PullRequest import PullRequest
from rich.console import Console

from prsync.github.errors import PullRequestError, is_pull_request_exists, is_reviewer_scope_error
from prsync.github.repository import RepositoryRef
from prsync.models import PullRequestOptions, PullRequestRecord

console = Console()


class PullRequestReconciler:
    def __init__(self, gh: Github, verbose: bool = False):
        self.gh = gh
        self.verbose = verbose

    def _create_or_update(
        self,
        options: PullRequestOptions,
        base_repository: str,
        head_repository: str,
    ) -> tuple[PullRequest, bool]:
        head_owner = RepositoryRef.parse(head_repository).owner
        head = f"{head_owner}:{options.branch}"
        repo = self.gh.get_repo(RepositoryRef.parse(base_repository).full_name)

        try:
            console.print("[blue]Attempting creation of pull request[/blue]")
            pull = repo.create_pull(
                base=options.base,
                head=head,
                title=options.title,
                body=options.body,
                draft=options.draft,
                head_repo=head_repository,
            )
            console.print(f"[green]Created pull request #{pull.number} ({head} => {options.base})[/green]")
            return pull, True
        except GithubException as e:
            if not is_pull_request_exists(e):
                raise
            console.print(f"[blue]A pull request already exists for {head}[/blue]")

        console.print("[blue]Fetching existing pull request[/blue]")
        pull = next(iter(repo.get_pulls(state="open", head=head, base=options.base)), None)
        if pull is None:
            raise PullRequestError(
                f"A pull request exists for {head} but no open one targets {options.base}"
            )

        console.print("[blue]Attempting update of pull request[/blue]")
        pull.edit(title=options.title, body=options.body)
        console.print(f"[green]Updated pull request #{pull.number} ({head} => {options.base})[/green]")
        return pull, False

    def create_or_update(
        self,
        options: PullRequestOptions,
        base_repository: str,
        head_repository: str,
    ) -> PullRequestRecord:
        """
        Open a pull request for `options.branch`, or update the open one.

        Args:
            options: Branch, base, title, body and draft flag
            base_repository: "owner/name" the pull request targets
            head_repository: "owner/name" holding the branch

        Returns:
            The pull request; `created` tells whether it was just opened
        """
        pull, created = self._create_or_update(options, base_repository, head_repository)
        return PullRequestRecord(number=pull.number, html_url=pull.html_url, created=created)

    def create_or_update_pull_request(
        self,
        options: PullRequestOptions,
        base_repository: str,
        head_repository: str,
    ) -> PullRequestRecord:
        """
        Reconcile the pull request, then apply its metadata.

        Metadata steps run in order (milestone, labels, assignees,
        reviewers). A failing step leaves earlier steps applied.
        """
        pull, created = self._create_or_update(options, base_repository, head_repository)

        if options.milestone is not None:
            console.print(f"[blue]Applying milestone '{options.milestone}'[/blue]")
            repo = self.gh.get_repo(RepositoryRef.parse(base_repository).full_name)
            pull.as_issue().edit(milestone=repo.get_milestone(options.milestone))
            console.print(f"[blue]Applied milestone '{options.milestone}'[/blue]")

        if options.labels:
            console.print(f"[blue]Applying labels '{', '.join(options.labels)}'[/blue]")
            pull.add_to_labels(*options.labels)
            console.print(f"[blue]Applied labels '{', '.join(options.labels)}'[/blue]")

        if options.assignees:
            console.print(f"[blue]Applying assignees '{', '.join(options.assignees)}'[/blue]")
            pull.add_to_assignees(*options.assignees)
            console.print(f"[blue]Applied assignees '{', '.join(options.assignees)}'[/blue]")

        request = options.reviewer_request
        if request.reviewers:
            console.print(f"[blue]Requesting reviewers '{', '.join(request.reviewers)}'[/blue]")
        if request.team_reviewers:
            console.print(f"[blue]Requesting team reviewers '{', '.join(request.team_reviewers)}'[/blue]")
        if request:
            try:
                pull.create_review_request(**request.to_kwargs())
            except GithubException as e:
                if is_reviewer_scope_error(e):
                    console.print(
                        "[red]Unable to request reviewers. If requesting team reviewers "
                        "a 'repo' scoped PAT is required.[/red]"
                    )
                raise
            console.print("[blue]Requested reviewers[/blue]")

        return PullRequestRecord(number=pull.number, html_url=pull.html_url, created=created)

    def get_repository_parent(self, repository: str) -> Optional[str]:
        """Return the fork parent's "owner/name", or None if not a fork."""
        repo = self.gh.get_repo(RepositoryRef.parse(repository).full_name)
        if repo.parent is None:
            return None
        return repo.parent.full_name
