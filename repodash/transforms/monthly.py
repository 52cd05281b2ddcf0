"""Bucketing of timestamped records into the trailing 12 calendar months."""
from dataclasses import dataclass
from datetime import datetime

from repodash.models.release import ReleaseRecord
from repodash.models.workflow_run import WorkflowRunRecord
from repodash.utils.dates import format_month_label
from repodash.utils.dates import month_key
from repodash.utils.dates import trailing_months
from repodash.utils.formatting import round_half_up

WINDOW_MONTHS = 12


@dataclass
class MonthlyReleaseStats:
    year: int
    month: int
    label: str
    stable: int = 0
    beta: int = 0
    total: int = 0


@dataclass
class WorkflowMonthlyStats:
    year: int
    month: int
    label: str
    # None means no valid run that month, which is not the same as 0 minutes
    average_duration: float | None = None
    total_runs: int = 0


def calculate_monthly_release_stats(
    items: list[ReleaseRecord],
    now: datetime | None = None,
) -> list[MonthlyReleaseStats]:
    """
    Release counts per month for the last 12 months, oldest first.

    Items are placed by publish date (creation date when unpublished);
    drafts are skipped, prereleases count as beta and everything else as
    stable. Items outside the window are ignored and empty months are zero-filled.
    """
    window = {
        key: MonthlyReleaseStats(
            year=key[0], month=key[1], label=format_month_label(*key),
        )
        for key in trailing_months(now, WINDOW_MONTHS)
    }

    for item in items:
        if item.draft:
            continue
        released_at = item.released_at
        if released_at is None:
            continue
        stats = window.get(month_key(released_at))
        if stats is None:
            continue
        stats.total += 1
        if item.prerelease:
            stats.beta += 1
        else:
            stats.stable += 1

    return list(window.values())


def calculate_workflow_monthly_stats(
    runs: list[WorkflowRunRecord],
    now: datetime | None = None,
) -> list[WorkflowMonthlyStats]:
    """
    Average run duration in minutes per month for the last 12 months.

    Runs are placed by creation date. Runs without a plausible duration are
    left out of both the average and the run count.
    """
    totals: dict[tuple[int, int], list[float]] = {
        key: [] for key in trailing_months(now, WINDOW_MONTHS)
    }

    for run in runs:
        if not run.has_valid_duration or run.created_at is None:
            continue
        durations = totals.get(month_key(run.created_at))
        if durations is not None:
            durations.append(run.duration_seconds)

    result = []
    for (year, month), durations in totals.items():
        result.append(
            WorkflowMonthlyStats(
                year=year,
                month=month,
                label=format_month_label(year, month),
                average_duration=round_half_up(
                    sum(durations) / len(durations) / 60, 2,
                ) if durations else None,
                total_runs=len(durations),
            ),
        )
    return result
