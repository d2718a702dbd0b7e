"""
Host configuration for prsync.

Values come from the environment (a local .env file is honoured).
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_HOSTNAME = "github.com"

# Concurrent blob uploads per tree
DEFAULT_MAX_WORKERS = 8


@dataclass
class HostConfig:
    """Credentials and endpoint for the GitHub host."""

    token: str
    server_hostname: str = DEFAULT_HOSTNAME
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def base_url(self) -> str:
        if self.server_hostname == DEFAULT_HOSTNAME:
            return "https://api.github.com"
        return f"https://{self.server_hostname}/api/v3"

    @classmethod
    def from_env(cls, server_hostname: Optional[str] = None) -> "HostConfig":
        """
        Build a config from environment variables.

        Reads GITHUB_TOKEN, GITHUB_SERVER_HOSTNAME (falling back to the host
        of GITHUB_SERVER_URL) and PRSYNC_MAX_WORKERS.

        Raises:
            RuntimeError: If GITHUB_TOKEN is not set
        """
        token = os.getenv("GITHUB_TOKEN")
        if not token:
            raise RuntimeError(
                "GITHUB_TOKEN environment variable is not set. "
                "Please set it to a GitHub token with 'repo' scope."
            )

        if server_hostname is None:
            server_hostname = os.getenv("GITHUB_SERVER_HOSTNAME")
        if not server_hostname and os.getenv("GITHUB_SERVER_URL"):
            server_hostname = urlparse(os.environ["GITHUB_SERVER_URL"]).hostname

        max_workers = os.getenv("PRSYNC_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
        try:
            max_workers = int(max_workers)
        except ValueError:
            raise RuntimeError(
                f"PRSYNC_MAX_WORKERS must be an integer, got {max_workers!r}"
            ) from None

        return cls(
            token=token,
            server_hostname=server_hostname or DEFAULT_HOSTNAME,
            max_workers=max_workers,
        )


def get_metrics_path() -> str:
    return os.getenv("PRSYNC_METRICS_PATH", "prsync_metrics.jsonl")
