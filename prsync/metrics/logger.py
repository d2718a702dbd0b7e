"""
Run Metrics Logger for prsync.

Stores one structured record per CLI run for later analysis.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from prsync.config import get_metrics_path


@dataclass
class RunMetrics:
    """Metrics for a single prsync run."""

    timestamp: str
    command: str
    repository: str
    branch: Optional[str]

    # Outcome
    success: bool
    error: Optional[str] = None

    # Push
    commits_pushed: int = 0
    head_sha: Optional[str] = None

    # Pull request
    pr_number: Optional[int] = None
    pr_url: Optional[str] = None
    pr_created: Optional[bool] = None

    duration_seconds: Optional[float] = None


class MetricsLogger:
    """
    Persistent metrics logger.

    Writes JSON lines to a file for later analysis.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or get_metrics_path())

    def log(self, metrics: RunMetrics) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(asdict(metrics)) + "\n")

    def read_all(self) -> list[RunMetrics]:
        if not self.path.exists():
            return []

        metrics = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    metrics.append(RunMetrics(**json.loads(line)))

        return metrics

    def summary(self) -> dict:
        """
        Generate summary statistics.

        Returns:
            Dictionary of summary stats
        """
        all_metrics = self.read_all()

        if not all_metrics:
            return {"total_runs": 0}

        total = len(all_metrics)
        successful = sum(1 for m in all_metrics if m.success)
        prs_created = sum(1 for m in all_metrics if m.pr_created)
        prs_updated = sum(1 for m in all_metrics if m.pr_created is False)

        return {
            "total_runs": total,
            "successful": successful,
            "success_rate": successful / total,
            "commits_pushed": sum(m.commits_pushed for m in all_metrics),
            "prs_created": prs_created,
            "prs_updated": prs_updated,
        }


def log_run(
    command: str,
    repository: str,
    branch: Optional[str],
    success: bool,
    logger: Optional[MetricsLogger] = None,
    **fields,
) -> RunMetrics:
    """
    Log metrics from a completed run.

    Extra keyword arguments fill the optional RunMetrics fields.
    """
    metrics = RunMetrics(
        timestamp=datetime.now(timezone.utc).isoformat(),
        command=command,
        repository=repository,
        branch=branch,
        success=success,
        **fields,
    )

    (logger or MetricsLogger()).log(metrics)
    return metrics
