"""
Version parsing and comparison for release tags and dependency ranges.

This is a deliberately small comparator: a leading range operator or "v" is
stripped and only the first three numeric components are compared.
Pre-release precedence and build metadata are ignored.
"""
import re
from datetime import datetime
from datetime import timezone

from repodash.models.release import ReleaseRecord

_PREFIX_RE = re.compile(r'^[\^~>=v]+')
_LEADING_DIGITS_RE = re.compile(r'^\d+')
_BASE_VERSION_RE = re.compile(r'^v?(\d+\.\d+\.\d+)')


def clean_version(version: str) -> str:
    """
    >>> clean_version('^1.2.3')
    '1.2.3'
    """
    return _PREFIX_RE.sub('', version.strip()).strip()


def parse_version(version: str) -> tuple[int, int, int]:
    """
    Up to three numeric components; missing or non-numeric parts count as 0.

    >>> parse_version('1.49.0-beta.1')
    (1, 49, 0)
    >>> parse_version('v1.0')
    (1, 0, 0)
    """
    components = clean_version(version).split('.')[:3]
    numbers = []
    for component in components:
        match = _LEADING_DIGITS_RE.match(component)
        numbers.append(int(match.group()) if match else 0)
    numbers.extend([0] * (3 - len(numbers)))
    return tuple(numbers)


def compare_versions(v1: str, v2: str) -> int:
    """1 if v1 > v2, -1 if v1 < v2, 0 if equal."""
    parts1 = parse_version(v1)
    parts2 = parse_version(v2)
    if parts1 > parts2:
        return 1
    if parts1 < parts2:
        return -1
    return 0


def is_version_greater_or_equal(version: str, target: str) -> bool:
    return compare_versions(version, target) >= 0


def base_version(tag: str) -> str | None:
    """
    >>> base_version('v1.49.0-beta.1')
    '1.49.0'
    """
    match = _BASE_VERSION_RE.match(tag)
    return match.group(1) if match else None


def sort_releases_by_date(releases: list[ReleaseRecord]) -> list[ReleaseRecord]:
    """Newest first, by publish date falling back to creation date."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(
        releases,
        key=lambda r: r.released_at or oldest,
        reverse=True,
    )


def get_latest_stable_release(releases: list[ReleaseRecord]) -> ReleaseRecord | None:
    """First stable release in the given (newest-first) order."""
    for release in releases:
        if not release.prerelease and not release.draft:
            return release
    return None


def get_latest_stable_version(releases: list[ReleaseRecord]) -> str | None:
    stable = get_latest_stable_release(releases)
    return stable.tag_name if stable else None


def get_latest_beta_release(releases: list[ReleaseRecord]) -> ReleaseRecord | None:
    """
    First prerelease in the given (newest-first) order, unless a stable
    release already covers its base version.
    """
    latest_beta = next(
        (r for r in releases if r.prerelease and not r.draft), None,
    )
    if latest_beta is None:
        return None

    stable_version = get_latest_stable_version(releases)
    if stable_version is None:
        return latest_beta

    beta_base = base_version(latest_beta.tag_name)
    stable_base = base_version(stable_version)
    if beta_base is None or stable_base is None:
        return latest_beta

    if compare_versions(beta_base, stable_base) > 0:
        return latest_beta
    # Superseded: 1.49.0-beta.1 after 1.49.0 has shipped
    return None


def get_latest_beta_version(releases: list[ReleaseRecord]) -> str | None:
    beta = get_latest_beta_release(releases)
    return beta.tag_name if beta else None
