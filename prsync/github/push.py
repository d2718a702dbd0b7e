"""
Replay a list of local commits as host-created commits.

The branch ref moves once, after the last commit, so intermediate commits
never show up as the branch head.
"""

from typing import Optional, Sequence

from github import Github
from rich.console import Console

from prsync.config import DEFAULT_MAX_WORKERS
from prsync.github.objects import CommitObjectBuilder
from prsync.github.refs import RefReconciler
from prsync.github.repository import RepositoryRef
from prsync.models import ContentReader, LocalCommit, RemoteCommitResult

console = Console()


class SequentialCommitPusher:
    def __init__(
        self,
        gh: Github,
        builder: Optional[CommitObjectBuilder] = None,
        refs: Optional[RefReconciler] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        verbose: bool = False,
    ):
        self.builder = builder or CommitObjectBuilder(gh, max_workers=max_workers, verbose=verbose)
        self.refs = refs or RefReconciler(gh, verbose=verbose)
        self.verbose = verbose

    def replay(
        self,
        commit: LocalCommit,
        repo: RepositoryRef,
        reader: ContentReader,
        previous: Optional[RemoteCommitResult] = None,
    ) -> RemoteCommitResult:
        """
        Create the remote counterpart of one local commit.

        With a `previous` result, that commit replaces the first parent and
        its tree is the base for the changes. Without one, the declared
        first parent is the base.
        """
        parents = list(commit.parents)
        base_tree = parents[0] if parents else commit.tree
        if previous is not None:
            parents = [previous.sha] + parents[1:]
            base_tree = previous.tree

        tree = commit.tree
        if commit.changes:
            tree = self.builder.build_tree(repo, base_tree, commit.changes, reader, commit.sha)

        sha = self.builder.build_commit(repo, parents, tree, commit.subject, commit.body)
        if self.verbose:
            console.print(f"[dim]Created commit {sha} for local commit {commit.sha}[/dim]")
        return RemoteCommitResult(sha=sha, tree=tree)

    def push(
        self,
        commits: Sequence[LocalCommit],
        repo: RepositoryRef,
        branch: str,
        reader: ContentReader,
    ) -> list[RemoteCommitResult]:
        """
        Replay `commits` oldest first and point `branch` at the last one.

        Any failure stops the replay before the ref is touched; commits
        already created stay on the host unreferenced.

        Returns:
            The created commits, in order
        """
        if not commits:
            raise ValueError("No commits to push")

        console.print(f"[blue]Pushing {len(commits)} commit(s) to {repo}:{branch}[/blue]")
        results: list[RemoteCommitResult] = []
        previous = None
        for commit in commits:
            previous = self.replay(commit, repo, reader, previous)
            results.append(previous)

        self.refs.ensure_ref(repo, branch, previous.sha)
        console.print(f"[green]Pushed {len(results)} commit(s); {branch} is at {previous.sha}[/green]")
        return results
