"""Local repository access."""

from prsync.local.git_source import GitCommitSource, parse_raw_diff

__all__ = ["GitCommitSource", "parse_raw_diff"]
