import pytest

from repodash.models.release import ReleaseRecord
from repodash.utils.versions import clean_version
from repodash.utils.versions import compare_versions
from repodash.utils.versions import get_latest_beta_release
from repodash.utils.versions import get_latest_beta_version
from repodash.utils.versions import get_latest_stable_release
from repodash.utils.versions import get_latest_stable_version
from repodash.utils.versions import is_version_greater_or_equal
from repodash.utils.versions import parse_version
from repodash.utils.versions import sort_releases_by_date


def make_release(tag, prerelease=False, published_at='2024-01-01T00:00:00Z', draft=False):
    return ReleaseRecord(
        repo_full_name='acme/app',
        repo_name='app',
        tag_name=tag,
        prerelease=prerelease,
        draft=draft,
        published_at=published_at,
    )


@pytest.mark.parametrize(
    'raw,expected', [
        ('^1.2.3', '1.2.3'),
        ('~1.2.3', '1.2.3'),
        ('>=1.2.3', '1.2.3'),
        ('v1.2.3', '1.2.3'),
        ('=1.2.3', '1.2.3'),
        ('1.2.3', '1.2.3'),
    ],
)
def test_clean_version(raw, expected):
    assert clean_version(raw) == expected


def test_parse_version():
    assert parse_version('1.49.0-beta.1') == (1, 49, 0)
    assert parse_version('v1.0') == (1, 0, 0)
    assert parse_version('2') == (2, 0, 0)
    assert parse_version('1.2.3.4') == (1, 2, 3)
    assert parse_version('latest') == (0, 0, 0)


def test_is_version_greater_or_equal():
    assert is_version_greater_or_equal('^2.1.0', '2.0.9') is True
    assert is_version_greater_or_equal('1.9.9', '2.0.0') is False
    assert is_version_greater_or_equal('v1.0', '1.0.0') is True
    assert is_version_greater_or_equal('~18.2.0', '18.2.0') is True


def test_compare_versions():
    assert compare_versions('1.10.0', '1.9.0') == 1
    assert compare_versions('1.9.0', '1.10.0') == -1
    assert compare_versions('v1.2.3', '1.2.3') == 0


def test_beta_superseded_by_equal_stable():
    releases = [
        make_release('1.49.0', published_at='2024-02-01T00:00:00Z'),
        make_release('1.49.0-beta.1', prerelease=True, published_at='2024-01-20T00:00:00Z'),
    ]
    assert get_latest_beta_release(releases) is None
    assert get_latest_stable_version(releases) == '1.49.0'


def test_beta_superseded_by_newer_stable():
    releases = [
        make_release('v1.50.2'),
        make_release('v1.49.0-beta.1', prerelease=True),
    ]
    assert get_latest_beta_version(releases) is None


def test_beta_kept_when_ahead_of_stable():
    releases = [
        make_release('1.49.0-beta.1', prerelease=True, published_at='2024-02-01T00:00:00Z'),
        make_release('1.48.3', published_at='2024-01-20T00:00:00Z'),
    ]
    assert get_latest_beta_version(releases) == '1.49.0-beta.1'


def test_beta_kept_without_stable_or_parsable_tags():
    assert get_latest_beta_version([make_release('1.0.0-rc.1', prerelease=True)]) == '1.0.0-rc.1'
    releases = [
        make_release('nightly', prerelease=True),
        make_release('1.0.0'),
    ]
    assert get_latest_beta_version(releases) == 'nightly'


def test_latest_stable_skips_prereleases_and_drafts():
    releases = [
        make_release('2.0.0-beta.1', prerelease=True),
        make_release('2.0.0-draft', draft=True),
        make_release('1.9.0'),
    ]
    assert get_latest_stable_release(releases).tag_name == '1.9.0'
    assert get_latest_stable_release([]) is None


def test_sort_releases_by_date_newest_first():
    releases = [
        make_release('1.0.0', published_at='2024-01-01T00:00:00Z'),
        make_release('1.2.0', published_at='2024-03-01T00:00:00Z'),
        make_release('1.1.0', published_at=None),
    ]
    releases[2].created_at = None
    ordered = sort_releases_by_date(releases)
    assert [r.tag_name for r in ordered] == ['1.2.0', '1.0.0', '1.1.0']
