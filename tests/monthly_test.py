from datetime import datetime
from datetime import timezone

from repodash.models.release import ReleaseRecord
from repodash.models.workflow_run import WorkflowRunRecord
from repodash.transforms.monthly import calculate_monthly_release_stats
from repodash.transforms.monthly import calculate_workflow_monthly_stats

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_release(published_at, prerelease=False, created_at=None, tag='v1.0.0', draft=False):
    return ReleaseRecord(
        repo_full_name='acme/app',
        repo_name='app',
        tag_name=tag,
        prerelease=prerelease,
        draft=draft,
        published_at=published_at,
        created_at=created_at or published_at,
    )


def make_run(created_at, duration_seconds, run_id=1):
    return WorkflowRunRecord(
        id=run_id,
        repo_full_name='acme/app',
        repo_name='app',
        name='CI/CD',
        created_at=created_at,
        duration_seconds=duration_seconds,
    )


def test_release_stats_empty_input_has_twelve_zero_months():
    result = calculate_monthly_release_stats([], now=NOW)

    assert len(result) == 12
    assert [(m.year, m.month) for m in result][0] == (2023, 7)
    assert [(m.year, m.month) for m in result][-1] == (2024, 6)
    assert result[0].label == 'Jul 2023'
    assert result[-1].label == 'Jun 2024'
    assert all(m.stable == m.beta == m.total == 0 for m in result)


def test_release_stats_window_crosses_year_boundary():
    result = calculate_monthly_release_stats(
        [], now=datetime(2024, 1, 3, tzinfo=timezone.utc),
    )
    keys = [(m.year, m.month) for m in result]
    assert keys[0] == (2023, 2)
    assert keys[-1] == (2024, 1)
    assert len(set(keys)) == 12


def test_release_stats_counts_stable_and_beta():
    releases = [
        make_release('2024-06-01T10:00:00Z'),
        make_release('2024-06-10T10:00:00Z', prerelease=True),
        make_release('2024-05-20T10:00:00Z', prerelease=True),
        make_release('2023-07-01T00:00:00Z'),
    ]
    result = calculate_monthly_release_stats(releases, now=NOW)
    by_month = {(m.year, m.month): m for m in result}

    assert (by_month[(2024, 6)].stable, by_month[(2024, 6)].beta, by_month[(2024, 6)].total) == (1, 1, 2)
    assert (by_month[(2024, 5)].stable, by_month[(2024, 5)].beta) == (0, 1)
    assert by_month[(2023, 7)].stable == 1
    assert sum(m.stable for m in result) + sum(m.beta for m in result) == len(releases)


def test_release_stats_falls_back_to_created_at():
    release = make_release(None, created_at='2024-03-05T00:00:00Z')
    result = calculate_monthly_release_stats([release], now=NOW)
    by_month = {(m.year, m.month): m for m in result}
    assert by_month[(2024, 3)].total == 1


def test_release_stats_ignores_items_outside_window():
    releases = [
        make_release('2023-06-30T23:59:59Z'),
        make_release('2024-07-01T00:00:00Z'),
    ]
    result = calculate_monthly_release_stats(releases, now=NOW)
    assert sum(m.total for m in result) == 0


def test_workflow_monthly_average_in_minutes():
    runs = [
        make_run('2024-05-02T10:00:00Z', 120),
        make_run('2024-05-20T10:00:00Z', 240),
        make_run('2024-06-01T10:00:00Z', 100),
    ]
    result = calculate_workflow_monthly_stats(runs, now=NOW)
    by_month = {(m.year, m.month): m for m in result}

    assert len(result) == 12
    assert by_month[(2024, 5)].average_duration == 3.0
    assert by_month[(2024, 5)].total_runs == 2
    assert by_month[(2024, 6)].average_duration == 1.67


def test_workflow_monthly_excludes_implausible_durations():
    runs = [
        make_run('2024-04-02T10:00:00Z', 0),
        make_run('2024-04-03T10:00:00Z', -30),
        make_run('2024-04-04T10:00:00Z', 86400),
        make_run('2024-03-04T10:00:00Z', 86399),
        make_run('2024-03-05T10:00:00Z', 90000),
    ]
    result = calculate_workflow_monthly_stats(runs, now=NOW)
    by_month = {(m.year, m.month): m for m in result}

    assert by_month[(2024, 4)].average_duration is None
    assert by_month[(2024, 4)].total_runs == 0
    assert by_month[(2024, 3)].total_runs == 1
    assert by_month[(2024, 3)].average_duration == round(86399 / 60, 2)


def test_workflow_monthly_empty_months_are_none_not_zero():
    result = calculate_workflow_monthly_stats([], now=NOW)
    assert all(m.average_duration is None and m.total_runs == 0 for m in result)


def test_release_stats_skip_drafts():
    releases = [
        make_release('2024-06-01T10:00:00Z'),
        make_release('2024-06-05T10:00:00Z', draft=True),
        make_release('2024-06-06T10:00:00Z', prerelease=True, draft=True),
    ]
    result = calculate_monthly_release_stats(releases, now=NOW)
    by_month = {(m.year, m.month): m for m in result}

    assert (by_month[(2024, 6)].stable, by_month[(2024, 6)].beta, by_month[(2024, 6)].total) == (1, 0, 1)
    assert sum(m.stable for m in result) + sum(m.beta for m in result) == 1
