"""
Branch ref reconciliation.

A ref lookup has three outcomes. Only a 404 means the branch is missing;
every other failure is carried as an error and re-raised by callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from github import Github, GithubException
from github.GitRef import GitRef
from rich.console import Console

from prsync.github.errors import RefUpdateError, is_not_found
from prsync.github.repository import RepositoryRef

console = Console()


class RefStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class RefLookup:
    status: RefStatus
    sha: Optional[str] = None
    ref: Optional[GitRef] = None
    error: Optional[Exception] = None

    @property
    def exists(self) -> bool:
        return self.status is RefStatus.FOUND

    def raise_for_error(self) -> None:
        if self.status is RefStatus.ERROR and self.error is not None:
            raise self.error


class RefReconciler:
    """Points a branch at a commit, creating the branch when needed."""

    def __init__(self, gh: Github, verbose: bool = False):
        self.gh = gh
        self.verbose = verbose

    def lookup_ref(self, repo: RepositoryRef, branch: str) -> RefLookup:
        try:
            ref = self.gh.get_repo(repo.full_name).get_git_ref(f"heads/{branch}")
            # the ref is fetched on first attribute access
            sha = ref.object.sha
        except GithubException as e:
            if is_not_found(e):
                return RefLookup(RefStatus.NOT_FOUND)
            return RefLookup(RefStatus.ERROR, error=e)
        return RefLookup(RefStatus.FOUND, sha=sha, ref=ref)

    def ensure_ref(self, repo: RepositoryRef, branch: str, sha: str) -> RefLookup:
        """
        Point `branch` at `sha`.

        An existing branch is fast-forwarded (the host rejects anything
        else); a missing one is created. Lookup and write are separate
        calls, so a branch created in between fails the create and is
        reported as RefUpdateError.

        Returns:
            The lookup that decided between update and create
        """
        lookup = self.lookup_ref(repo, branch)
        lookup.raise_for_error()

        try:
            if lookup.exists:
                if self.verbose:
                    console.print(f"[dim]Branch {branch} exists, updating ref[/dim]")
                console.print(f"[blue]Updating heads/{branch} to {sha}[/blue]")
                lookup.ref.edit(sha=sha, force=False)
                console.print(f"[blue]Updated heads/{branch} to {sha}[/blue]")
            else:
                if self.verbose:
                    console.print(f"[dim]Branch {branch} does not exist, creating ref[/dim]")
                console.print(f"[blue]Creating refs/heads/{branch} at {sha}[/blue]")
                self.gh.get_repo(repo.full_name).create_git_ref(
                    ref=f"refs/heads/{branch}", sha=sha
                )
                console.print(f"[blue]Created refs/heads/{branch} at {sha}[/blue]")
        except GithubException as e:
            action = "update" if lookup.exists else "create"
            console.print(f"[red]Failed to {action} branch {branch}: {e}[/red]")
            raise RefUpdateError(f"Failed to {action} branch '{branch}' in {repo}") from e

        return lookup
