from dataclasses import dataclass

from repodash.models.workflow_run import WorkflowRunRecord
from repodash.utils.formatting import round_half_up


@dataclass
class WorkflowStats:
    total: int = 0
    successful: int = 0
    failed: int = 0
    avg_duration: float = 0.0
    success_rate: int = 0


def calculate_workflow_stats(runs: list[WorkflowRunRecord]) -> WorkflowStats:
    """
    Summary over a whole run set: outcome counts, success rate in percent and
    average duration in minutes.

    The average uses runs with a plausible duration; when none has one, it
    falls back to every run so the figure is never blank.
    """
    if not runs:
        return WorkflowStats()

    successful = sum(1 for r in runs if r.conclusion == 'success')
    failed = sum(1 for r in runs if r.conclusion == 'failure')

    valid = [r for r in runs if r.has_valid_duration] or runs
    avg_duration = sum(r.duration_seconds for r in valid) / len(valid) / 60

    return WorkflowStats(
        total=len(runs),
        successful=successful,
        failed=failed,
        avg_duration=round_half_up(avg_duration, 1),
        success_rate=int(round_half_up(successful / len(runs) * 100)),
    )


def recent_runs(runs: list[WorkflowRunRecord], limit: int = 50) -> list[WorkflowRunRecord]:
    """The latest `limit` runs, oldest first, as plotted on the run-time chart."""
    ordered = sorted(
        (r for r in runs if r.created_at is not None),
        key=lambda r: r.created_at,
    )
    return ordered[-limit:]
