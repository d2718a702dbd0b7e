"""
GitHub Integration for prsync.

Handles:
- Replaying local commits as host-signed commits
- Single signed commits through GraphQL
- Branch ref creation and fast-forward
- Pull request creation, update and metadata
"""

from prsync.github.client import get_github_client, get_repo_from_remote
from prsync.github.helper import GitHubHelper
from prsync.github.objects import CommitObjectBuilder
from prsync.github.pr import PullRequestReconciler
from prsync.github.push import SequentialCommitPusher
from prsync.github.refs import RefLookup, RefReconciler, RefStatus
from prsync.github.repository import RepositoryRef
from prsync.github.signed import AtomicSignedCommitPusher

__all__ = [
    "get_github_client",
    "get_repo_from_remote",
    "GitHubHelper",
    "CommitObjectBuilder",
    "PullRequestReconciler",
    "SequentialCommitPusher",
    "RefLookup",
    "RefReconciler",
    "RefStatus",
    "RepositoryRef",
    "AtomicSignedCommitPusher",
]
