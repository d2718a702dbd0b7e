"""
prsync

Replays local commits onto GitHub as signed commits and keeps one pull
request per branch up to date.
"""

__version__ = "0.1.0"

from prsync.github.helper import GitHubHelper
from prsync.models import LocalCommit, PullRequestOptions, PullRequestRecord

__all__ = ["GitHubHelper", "LocalCommit", "PullRequestOptions", "PullRequestRecord", "__version__"]
