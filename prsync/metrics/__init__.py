"""
Run metrics for prsync.

Tracks what each run did:
- Commits pushed and the resulting head
- Pull requests created or updated
- Failures
"""

from prsync.metrics.logger import log_run, MetricsLogger, RunMetrics

__all__ = ["log_run", "MetricsLogger", "RunMetrics"]
