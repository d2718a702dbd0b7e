"""
prsync CLI Entry Point.

Usage:
    prsync push --branch my-feature --base origin/main
    prsync push --branch my-feature --base main --signed
    prsync pr --branch my-feature --base main --title "Add feature"
    prsync parent --repository owner/fork
"""

import argparse
import sys
import time
from pathlib import Path

from git import GitCommandError
from github import GithubException
from rich.console import Console
from rich.panel import Panel

from prsync import __version__
from prsync.config import HostConfig
from prsync.github.client import get_repo_from_remote
from prsync.github.errors import SyncError
from prsync.github.helper import GitHubHelper
from prsync.local.git_source import GitCommitSource
from prsync.metrics import log_run
from prsync.models import PullRequestOptions

console = Console()


def resolve_repository(args, config: HostConfig) -> str:
    if args.repository:
        return args.repository
    repository = get_repo_from_remote(args.path, config.server_hostname)
    if not repository:
        raise SyncError(
            f"Could not determine the repository from the origin remote of {args.path}; "
            "pass --repository owner/name"
        )
    return repository


def run_push(args, helper: GitHubHelper, repository: str) -> dict:
    source = GitCommitSource(args.path)

    if args.signed:
        commit = source.get_commit(args.head)
        result = helper.push_signed_commit(
            repository,
            args.branch,
            args.remote_base or args.base,
            commit.subject,
            source.file_changes(commit),
        )
        console.print(Panel.fit(
            f"[bold]Commit:[/bold] {result.sha}\n"
            f"[bold]Branch:[/bold] {result.ref_name}\n"
            f"[bold]Branch created:[/bold] {'Yes' if result.branch_created else 'No'}",
            title="Signed commit pushed",
            border_style="green",
        ))
        return {"commits_pushed": 1, "head_sha": result.sha}

    commits = source.get_commits(args.base, args.head)
    if not commits:
        console.print(f"[yellow]No commits between {args.base} and {args.head}[/yellow]")
        return {}

    results = helper.push_signed_commits(commits, source, repository, args.branch)
    console.print(Panel.fit(
        f"[bold]Commits:[/bold] {len(results)}\n"
        f"[bold]Head:[/bold] {results[-1].sha}",
        title=f"Pushed {repository}:{args.branch}",
        border_style="green",
    ))
    return {"commits_pushed": len(results), "head_sha": results[-1].sha}


def run_pr(args, helper: GitHubHelper, repository: str) -> dict:
    options = PullRequestOptions(
        branch=args.branch,
        base=args.base,
        title=args.title,
        body=args.body,
        draft=args.draft,
        milestone=args.milestone,
        labels=args.label,
        assignees=args.assignee,
        reviewers=args.reviewer,
        team_reviewers=args.team_reviewer,
    )
    head_repository = args.head_repository or repository
    pull = helper.create_or_update_pull_request(options, repository, head_repository)

    console.print(Panel.fit(
        f"[bold]PR URL:[/bold] {pull.html_url}\n"
        f"[bold]Action:[/bold] {'created' if pull.created else 'updated'}",
        title=f"Pull request #{pull.number}",
        border_style="green",
    ))
    return {"pr_number": pull.number, "pr_url": pull.html_url, "pr_created": pull.created}


def run_parent(args, helper: GitHubHelper, repository: str) -> dict:
    parent = helper.get_repository_parent(repository)
    if parent:
        console.print(parent)
    return {}


COMMANDS = {
    "push": run_push,
    "pr": run_pr,
    "parent": run_parent,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="prsync - replay commits onto GitHub as signed commits and reconcile the PR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  prsync push --branch my-feature --base origin/main
  prsync push --branch my-feature --base origin/main --remote-base main --signed
  prsync pr --branch my-feature --base main --title "Add feature" --label enhancement
        """,
    )
    parser.add_argument("--version", action="version", version=f"prsync {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--path", default=".", help="Path to the local repository (default: .)")
    common.add_argument(
        "--repository",
        help="Target repository as owner/name (default: taken from the origin remote)",
    )
    common.add_argument("--verbose", action="store_true", help="Print debug traces")

    subparsers = parser.add_subparsers(dest="command", required=True)

    push = subparsers.add_parser("push", parents=[common], help="Push local commits as signed commits")
    push.add_argument("--branch", required=True, help="Remote branch to update")
    push.add_argument("--base", required=True, help="Local revision the branch diverges from")
    push.add_argument("--head", default="HEAD", help="Local revision to push (default: HEAD)")
    push.add_argument(
        "--signed",
        action="store_true",
        help="Push only the head commit through the GraphQL API with inline contents",
    )
    push.add_argument(
        "--remote-base",
        help="Remote branch to create the branch from when --signed (default: --base)",
    )

    pr = subparsers.add_parser("pr", parents=[common], help="Create or update the pull request")
    pr.add_argument("--branch", required=True, help="Head branch")
    pr.add_argument("--base", required=True, help="Base branch")
    pr.add_argument("--title", required=True)
    pr.add_argument("--body", default="")
    pr.add_argument("--draft", action="store_true")
    pr.add_argument("--head-repository", help="Repository holding the branch (default: --repository)")
    pr.add_argument("--milestone", type=int)
    pr.add_argument("--label", action="append", default=[])
    pr.add_argument("--assignee", action="append", default=[])
    pr.add_argument("--reviewer", action="append", default=[])
    pr.add_argument("--team-reviewer", action="append", default=[])

    subparsers.add_parser("parent", parents=[common], help="Print the fork parent of the repository")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    repo_path = Path(args.path).resolve()
    if args.command == "push" and not (repo_path / ".git").exists():
        console.print(f"[red]Error: Not a git repository: {repo_path}[/red]")
        sys.exit(1)
    args.path = str(repo_path)

    repository = args.repository or ""
    start_time = time.time()
    try:
        config = HostConfig.from_env()
        repository = resolve_repository(args, config)
        helper = GitHubHelper(config, verbose=args.verbose)
        fields = COMMANDS[args.command](args, helper, repository)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)

    except (SyncError, GithubException, GitCommandError, RuntimeError) as e:
        console.print(f"\n[red]Error during {args.command}: {e}[/red]")
        log_run(
            args.command,
            repository,
            getattr(args, "branch", None),
            success=False,
            error=str(e),
            duration_seconds=time.time() - start_time,
        )
        sys.exit(1)

    log_run(
        args.command,
        repository,
        getattr(args, "branch", None),
        success=True,
        duration_seconds=time.time() - start_time,
        **fields,
    )


if __name__ == "__main__":
    main()
