"""
Push a single signed commit through the GraphQL API.

The commit is created with `createCommitOnBranch`, which carries file
contents inline and only succeeds while the branch still points at the
expected head. A missing branch is first created from the base ref.
"""

import json
from enum import Enum
from typing import Optional

from github import Github, GithubException
from rich.console import Console

from prsync.github.client import graphql
from prsync.github.errors import RefNotFoundError, StaleHeadError, is_stale_head
from prsync.github.repository import RepositoryRef
from prsync.models import BranchFileChangeSet, SignedCommitResult

console = Console()

REF_QUERY = """
query GetRefId($repoName: String!, $repoOwner: String!, $branchName: String!) {
  repository(owner: $repoOwner, name: $repoName) {
    id
    ref(qualifiedName: $branchName) {
      id
      name
      prefix
      target {
        id
        oid
      }
    }
  }
}
"""

CREATE_REF_MUTATION = """
mutation CreateNewBranch($branchName: String!, $oid: GitObjectID!, $repoId: ID!) {
  createRef(input: {name: $branchName, oid: $oid, repositoryId: $repoId}) {
    ref {
      id
      name
      prefix
    }
  }
}
"""

PUSH_COMMIT_MUTATION = """
mutation PushCommit(
  $repoNameWithOwner: String!,
  $branchName: String!,
  $headOid: GitObjectID!,
  $commitMessage: String!,
  $fileChanges: FileChanges
) {
  createCommitOnBranch(input: {
    branch: {repositoryNameWithOwner: $repoNameWithOwner, branchName: $branchName}
    fileChanges: $fileChanges
    message: {headline: $commitMessage}
    expectedHeadOid: $headOid
  }) {
    ref {
      id
      name
      prefix
    }
    commit {
      id
      abbreviatedOid
      oid
    }
  }
}
"""


class PushState(Enum):
    BRANCH_MISSING = "branch_missing"
    BRANCH_READY = "branch_ready"
    PUSHED = "pushed"


class AtomicSignedCommitPusher:
    def __init__(self, gh: Github, verbose: bool = False):
        self.gh = gh
        self.verbose = verbose
        self.state: Optional[PushState] = None

    def _fetch_ref(self, repo: RepositoryRef, branch: str) -> tuple[str, Optional[str]]:
        """Return the repository node id and the branch head oid (None if absent)."""
        data = graphql(
            self.gh,
            REF_QUERY,
            {"repoOwner": repo.owner, "repoName": repo.name, "branchName": branch},
        )
        if self.verbose:
            console.print(f"[dim]Fetched information for branch '{branch}' - '{json.dumps(data)}'[/dim]")
        repository = data["repository"]
        ref = repository.get("ref")
        oid = ref["target"]["oid"] if ref else None
        return repository["id"], oid

    def _create_branch(self, repo: RepositoryRef, branch: str, base: str) -> str:
        repo_id, base_oid = self._fetch_ref(repo, base)
        if base_oid is None:
            raise RefNotFoundError(f"Base ref '{base}' does not exist in {repo}")

        console.print(f"[blue]Creating new branch '{branch}' from '{base}' at {base_oid}[/blue]")
        data = graphql(
            self.gh,
            CREATE_REF_MUTATION,
            {"repoId": repo_id, "oid": base_oid, "branchName": f"refs/heads/{branch}"},
        )
        console.print(f"[blue]Created new branch '{branch}'[/blue]")
        if self.verbose:
            console.print(f"[dim]{json.dumps(data['createRef']['ref'])}[/dim]")
        return base_oid

    def push(
        self,
        repo: RepositoryRef,
        branch: str,
        base: str,
        commit_message: str,
        changes: BranchFileChangeSet,
    ) -> SignedCommitResult:
        """
        Create one signed commit on `branch`, creating the branch from
        `base` if needed.

        Raises:
            StaleHeadError: The branch moved after its head was read
            RefNotFoundError: Neither the branch nor `base` exists
        """
        self.state = None
        console.print("[blue]Use API to push a signed commit[/blue]")

        _, expected_head = self._fetch_ref(repo, branch)
        created = expected_head is None
        if created:
            self.state = PushState.BRANCH_MISSING
            if self.verbose:
                console.print(f"[dim]Branch does not exist - '{branch}'[/dim]")
            expected_head = self._create_branch(repo, branch, base)
        self.state = PushState.BRANCH_READY
        console.print(f"[blue]Hash ref of branch '{branch}' is '{expected_head}'[/blue]")

        variables = {
            "repoNameWithOwner": repo.full_name,
            "branchName": branch,
            "headOid": expected_head,
            "commitMessage": commit_message,
            "fileChanges": changes.to_payload(),
        }
        if self.verbose:
            redacted = {**variables, "fileChanges": changes.to_payload(include_contents=False)}
            console.print(f"[dim]Push commit with payload: '{json.dumps(redacted)}'[/dim]")

        try:
            data = graphql(self.gh, PUSH_COMMIT_MUTATION, variables)
        except GithubException as e:
            if is_stale_head(e):
                console.print(f"[red]Branch '{branch}' moved past {expected_head}[/red]")
                raise StaleHeadError(branch, expected_head) from e
            raise

        result = data["createCommitOnBranch"]
        self.state = PushState.PUSHED
        console.print(
            f"[green]Pushed commit with hash - '{result['commit']['oid']}' "
            f"on branch - '{result['ref']['name']}'[/green]"
        )
        return SignedCommitResult(
            sha=result["commit"]["oid"],
            ref_name=result["ref"]["name"],
            branch_created=created,
        )
