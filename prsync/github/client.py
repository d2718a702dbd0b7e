"""
GitHub API Client for prsync.

Provides the authenticated client plus the raw REST and GraphQL calls used
where PyGithub's object API would cost extra round trips.
"""

import re
from typing import Any, Optional

from git import InvalidGitRepositoryError, NoSuchPathError, Repo
from github import Auth, Github

from prsync.config import DEFAULT_HOSTNAME, HostConfig


def get_github_client(config: Optional[HostConfig] = None) -> Github:
    """
    Get authenticated GitHub client.

    Args:
        config: Host configuration, read from the environment when omitted

    Returns:
        Authenticated Github instance pointed at the configured host. Objects
        it returns are lazy and only fetched on first attribute access.
    """
    if config is None:
        config = HostConfig.from_env()

    return Github(auth=Auth.Token(config.token), base_url=config.base_url, lazy=True)


def rest_post(gh: Github, path: str, payload: dict[str, Any]) -> dict[str, Any]:
    """POST a JSON payload to an API path such as /repos/o/n/git/trees."""
    _, data = gh.requester.requestJsonAndCheck("POST", path, input=payload)
    return data


def graphql(gh: Github, query: str, variables: dict[str, Any]) -> dict[str, Any]:
    """Run a GraphQL query or mutation and return its `data` member."""
    _, response = gh.requester.graphql_query(query, variables)
    return response["data"]


def parse_remote_url(remote_url: str, hostname: str = DEFAULT_HOSTNAME) -> Optional[str]:
    """
    Extract "owner/repo" from a remote URL on the given host.

    Handles SSH (git@host:owner/repo.git) and HTTPS
    (https://[user@]host/owner/repo.git) remotes.
    """
    host = re.escape(hostname)

    ssh_match = re.match(rf"^(?:ssh://)?git@{host}[:/](.+?)(?:\.git)?/?$", remote_url)
    if ssh_match:
        return ssh_match.group(1)

    https_match = re.match(rf"^https?://(?:[^@/]+@)?{host}/(.+?)(?:\.git)?/?$", remote_url)
    if https_match:
        return https_match.group(1)

    return None


def get_repo_from_remote(
    repo_path: str,
    hostname: str = DEFAULT_HOSTNAME,
    remote: str = "origin",
) -> Optional[str]:
    """
    Extract GitHub repository identifier from git remote.

    Args:
        repo_path: Path to the git repository
        hostname: Host the remote is expected to point at
        remote: Remote name

    Returns:
        Repository identifier (e.g., "owner/repo") or None
    """
    try:
        repo = Repo(repo_path)
        urls = list(repo.remote(remote).urls)
    except (InvalidGitRepositoryError, NoSuchPathError, ValueError):
        return None

    for url in urls:
        repository = parse_remote_url(url, hostname)
        if repository:
            return repository
    return None
