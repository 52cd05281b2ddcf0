from dataclasses import dataclass
from datetime import datetime

from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.transforms.grouping import group_by_repository
from repodash.transforms.monthly import calculate_monthly_release_stats
from repodash.transforms.monthly import MonthlyReleaseStats
from repodash.utils.dates import is_older_than
from repodash.utils.versions import get_latest_beta_release
from repodash.utils.versions import get_latest_stable_release

STABLE_STALE_MONTHS = 1
BETA_STALE_MONTHS = 1 / 4.3  # about a week


@dataclass
class ReleaseSummary:
    repository: RepositorySnapshot
    releases: list[ReleaseRecord]
    latest_stable: ReleaseRecord | None
    latest_beta: ReleaseRecord | None
    monthly: list[MonthlyReleaseStats]
    stable_is_stale: bool = False
    beta_is_stale: bool = False


def summarize_releases(
    repositories: list[RepositorySnapshot],
    releases: list[ReleaseRecord],
    now: datetime | None = None,
) -> list[ReleaseSummary]:
    """Per-repository release view: published releases newest first, latest versions and cadence."""
    grouped = group_by_repository(
        repositories,
        releases,
        filter_fn=lambda r: not r.draft,
        key=lambda r: r.released_at.timestamp() if r.released_at else 0.0,
        reverse=True,
    )

    summaries = []
    for repository in repositories:
        repo_releases = grouped[repository.full_name]
        latest_stable = get_latest_stable_release(repo_releases)
        latest_beta = get_latest_beta_release(repo_releases)
        summaries.append(
            ReleaseSummary(
                repository=repository,
                releases=repo_releases,
                latest_stable=latest_stable,
                latest_beta=latest_beta,
                monthly=calculate_monthly_release_stats(repo_releases, now),
                # An old stable is only a concern when no beta is in flight
                stable_is_stale=bool(
                    latest_stable
                    and latest_beta is None
                    and is_older_than(latest_stable.released_at, STABLE_STALE_MONTHS, now)
                ),
                beta_is_stale=bool(
                    latest_beta
                    and is_older_than(latest_beta.released_at, BETA_STALE_MONTHS, now)
                ),
            ),
        )
    return summaries
