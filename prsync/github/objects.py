"""
Low level git object creation.

Blobs, trees and commits are created through the git data endpoints, so
every object is signed by the host when the commit is created.
"""

import base64
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from github import Github
from rich.console import Console

from prsync.config import DEFAULT_MAX_WORKERS
from prsync.github.client import rest_post
from prsync.github.repository import RepositoryRef
from prsync.models import Change, ContentReader, RemoteTreeEntry

console = Console()


class CommitObjectBuilder:
    """Creates blob, tree and commit objects on the host."""

    def __init__(
        self,
        gh: Github,
        max_workers: int = DEFAULT_MAX_WORKERS,
        verbose: bool = False,
    ):
        self.gh = gh
        self.max_workers = max_workers
        self.verbose = verbose

    def create_blob(self, repo: RepositoryRef, content: bytes, path: str = "") -> str:
        label = f" for file '{path}'" if path else ""
        console.print(f"[blue]Creating blob{label}[/blue]")
        data = rest_post(
            self.gh,
            f"{repo.api_path}/git/blobs",
            {
                "content": base64.b64encode(content).decode("ascii"),
                "encoding": "base64",
            },
        )
        console.print(f"[blue]Created blob {data['sha']}{label}[/blue]")
        return data["sha"]

    def tree_entries(
        self,
        repo: RepositoryRef,
        changes: Sequence[Change],
        reader: ContentReader,
        commit_sha: str = "",
    ) -> list[RemoteTreeEntry]:
        """
        Upload content for added and modified files and map every change
        to a tree entry. Uploads run concurrently; entry order follows
        `changes`.
        """

        def to_entry(change: Change) -> RemoteTreeEntry:
            sha: Optional[str] = None
            if change.status.requires_upload:
                sha = self.create_blob(repo, reader.read_file(commit_sha, change.path), change.path)
            return RemoteTreeEntry(path=change.path, mode=change.mode, sha=sha)

        workers = max(1, min(self.max_workers, len(changes)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(to_entry, changes))

    def build_tree(
        self,
        repo: RepositoryRef,
        base_tree: str,
        changes: Sequence[Change],
        reader: ContentReader,
        commit_sha: str = "",
    ) -> str:
        """
        Create a tree from `base_tree` plus the differential `changes`.

        Returns:
            The new tree sha, or `base_tree` untouched when there are no
            changes (no request is made)
        """
        if not changes:
            return base_tree

        label = commit_sha or base_tree
        if self.verbose:
            console.print(f"[dim]Creating tree objects for local commit {label}[/dim]")
        entries = self.tree_entries(repo, changes, reader, commit_sha)

        console.print(f"[blue]Creating tree for local commit {label}[/blue]")
        data = rest_post(
            self.gh,
            f"{repo.api_path}/git/trees",
            {
                "base_tree": base_tree,
                "tree": [entry.to_payload() for entry in entries],
            },
        )
        tree_sha = data["sha"]
        console.print(f"[blue]Created tree {tree_sha} for local commit {label}[/blue]")
        return tree_sha

    def build_commit(
        self,
        repo: RepositoryRef,
        parents: Sequence[str],
        tree: str,
        subject: str,
        body: str = "",
    ) -> str:
        """Create a commit object and return its sha."""
        message = f"{subject}\n\n{body}"
        console.print(f"[blue]Creating commit on tree {tree}[/blue]")
        data = rest_post(
            self.gh,
            f"{repo.api_path}/git/commits",
            {
                "message": message,
                "tree": tree,
                "parents": list(parents),
            },
        )
        console.print(f"[blue]Created commit {data['sha']}[/blue]")
        return data["sha"]
