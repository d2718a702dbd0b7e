"""
Local commit source backed by GitPython.

Lists the commits to replay, the paths each one changed, and the file
contents as of each commit.
"""

import base64
from pathlib import Path

from git import Repo
from git.objects import Commit

from prsync.models import (
    BranchFileChangeSet,
    Change,
    ChangeStatus,
    FileAddition,
    FileDeletion,
    FileMode,
    LocalCommit,
)

NULL_MODE = "000000"


def parse_status(letter: str) -> ChangeStatus:
    try:
        return ChangeStatus(letter[:1])
    except ValueError:
        return ChangeStatus.UNKNOWN


def parse_raw_diff(output: str) -> list[Change]:
    """
    Parse `git diff-tree -r --raw -z` output into changes.

    Records look like ":100644 100644 <sha> <sha> M\\0path\\0".
    """
    tokens = output.split("\0")
    changes = []
    for meta, path in zip(tokens[0::2], tokens[1::2]):
        meta = meta.strip()
        if not meta.startswith(":"):
            continue
        src_mode, dst_mode, _, _, letter = meta[1:].split()
        status = parse_status(letter)
        mode = src_mode if dst_mode == NULL_MODE else dst_mode
        changes.append(Change(path=path, mode=FileMode(mode), status=status))
    return changes


class GitCommitSource:
    """Reads commits and file contents from a local repository."""

    def __init__(self, repo_path: str = "."):
        self.repo_path = Path(repo_path)
        self.repo = Repo(repo_path)

    def changes_for(self, commit: Commit) -> list[Change]:
        if commit.parents:
            args = [commit.parents[0].hexsha, commit.hexsha]
        else:
            args = ["--root", commit.hexsha]
        output = self.repo.git.diff_tree(
            "-r", "--raw", "-z", "--no-renames", "--no-commit-id", "--no-abbrev", *args
        )
        return parse_raw_diff(output)

    def to_local_commit(self, commit: Commit) -> LocalCommit:
        message = commit.message if isinstance(commit.message, str) else commit.message.decode()
        subject, _, body = message.partition("\n")
        return LocalCommit(
            sha=commit.hexsha,
            parents=[p.hexsha for p in commit.parents],
            tree=commit.tree.hexsha,
            subject=subject.strip(),
            body=body.strip(),
            changes=self.changes_for(commit),
        )

    def get_commits(self, base: str, head: str = "HEAD") -> list[LocalCommit]:
        """Commits reachable from `head` but not `base`, oldest first."""
        commits = self.repo.iter_commits(f"{base}..{head}", reverse=True)
        return [self.to_local_commit(c) for c in commits]

    def get_commit(self, rev: str = "HEAD") -> LocalCommit:
        return self.to_local_commit(self.repo.commit(rev))

    def read_file(self, commit_sha: str, path: str) -> bytes:
        return (self.repo.commit(commit_sha).tree / path).data_stream.read()

    def file_changes(self, commit: LocalCommit) -> BranchFileChangeSet:
        """Inline additions and deletions for pushing `commit` in one mutation."""
        change_set = BranchFileChangeSet()
        for change in commit.changes:
            if change.status.requires_upload:
                contents = base64.b64encode(self.read_file(commit.sha, change.path)).decode("ascii")
                change_set.additions.append(FileAddition(path=change.path, contents=contents))
            else:
                change_set.deletions.append(FileDeletion(path=change.path))
        return change_set

