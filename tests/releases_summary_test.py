from datetime import datetime
from datetime import timezone

from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.transforms.releases import summarize_releases

NOW = datetime(2024, 6, 15, tzinfo=timezone.utc)


def make_repo(full_name, repo_id=1):
    owner, name = full_name.split('/')
    return RepositorySnapshot(
        id=repo_id, name=name, full_name=full_name, owner={'login': owner},
    )


def make_release(tag, published_at, prerelease=False, draft=False, repo='acme/app'):
    return ReleaseRecord(
        repo_full_name=repo,
        repo_name=repo.split('/')[1],
        tag_name=tag,
        prerelease=prerelease,
        draft=draft,
        published_at=published_at,
    )


def test_summary_orders_releases_and_drops_drafts():
    releases = [
        make_release('1.0.0', '2024-01-01T00:00:00Z'),
        make_release('1.2.0', '2024-06-01T00:00:00Z'),
        make_release('1.3.0', '2024-06-10T00:00:00Z', draft=True),
        make_release('1.1.0', '2024-03-01T00:00:00Z'),
    ]
    [summary] = summarize_releases([make_repo('acme/app')], releases, now=NOW)

    assert [r.tag_name for r in summary.releases] == ['1.2.0', '1.1.0', '1.0.0']
    assert summary.latest_stable.tag_name == '1.2.0'
    assert summary.latest_beta is None
    assert len(summary.monthly) == 12
    assert sum(m.total for m in summary.monthly) == 3


def test_summary_flags_stale_stable_without_beta():
    releases = [make_release('1.0.0', '2024-03-01T00:00:00Z')]
    [summary] = summarize_releases([make_repo('acme/app')], releases, now=NOW)
    assert summary.stable_is_stale is True


def test_summary_open_beta_clears_stable_staleness():
    releases = [
        make_release('1.1.0-beta.1', '2024-06-12T00:00:00Z', prerelease=True),
        make_release('1.0.0', '2024-03-01T00:00:00Z'),
    ]
    [summary] = summarize_releases([make_repo('acme/app')], releases, now=NOW)

    assert summary.latest_beta.tag_name == '1.1.0-beta.1'
    assert summary.stable_is_stale is False
    assert summary.beta_is_stale is False


def test_summary_flags_week_old_beta():
    releases = [
        make_release('1.1.0-beta.1', '2024-06-01T00:00:00Z', prerelease=True),
        make_release('1.0.0', '2024-05-20T00:00:00Z'),
    ]
    [summary] = summarize_releases([make_repo('acme/app')], releases, now=NOW)
    assert summary.beta_is_stale is True


def test_summary_for_repository_without_releases():
    summaries = summarize_releases(
        [make_repo('acme/app', 1), make_repo('acme/empty', 2)],
        [make_release('1.0.0', '2024-06-01T00:00:00Z')],
        now=NOW,
    )
    empty = summaries[1]
    assert empty.releases == []
    assert empty.latest_stable is None
    assert empty.stable_is_stale is False
    assert all(m.total == 0 for m in empty.monthly)
