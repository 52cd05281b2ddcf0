"""Version compliance of tracked packages across repositories."""
from dataclasses import dataclass
from dataclasses import field
from enum import Enum

from repodash.core.config import TrackedPackage
from repodash.models.package import PackageManifestSnapshot
from repodash.utils.versions import is_version_greater_or_equal

MISSING_VERSION = '-'


class VersionStatus(str, Enum):
    MISSING = 'missing'
    UNTRACKED = 'untracked'
    COMPLIANT = 'compliant'
    OUTDATED = 'outdated'

    def __str__(self) -> str:
        return self.value


def find_package_version(manifest: PackageManifestSnapshot, name: str) -> str | None:
    """Version range declared for `name`, checking runtime dependencies first."""
    return manifest.dependencies.get(name) or manifest.dev_dependencies.get(name)


def get_version_status(version: str | None, target_version: str | None = None) -> VersionStatus:
    if not version or version == MISSING_VERSION:
        return VersionStatus.MISSING
    if not target_version:
        return VersionStatus.UNTRACKED
    if is_version_greater_or_equal(version, target_version):
        return VersionStatus.COMPLIANT
    return VersionStatus.OUTDATED


@dataclass
class PackageCell:
    version: str
    status: VersionStatus


@dataclass
class PackageRow:
    package_name: str
    target_version: str | None = None
    cells: dict[str, PackageCell] = field(default_factory=dict)


def build_package_matrix(
    manifests: list[PackageManifestSnapshot],
    tracked_packages: list[TrackedPackage],
) -> list[PackageRow]:
    """One row per tracked package, one cell per repository (keyed by full name)."""
    rows = []
    for tracked in tracked_packages:
        row = PackageRow(
            package_name=tracked.name,
            target_version=tracked.target_version,
        )
        for manifest in manifests:
            version = find_package_version(manifest, tracked.name) or MISSING_VERSION
            row.cells[manifest.repo_full_name] = PackageCell(
                version=version,
                status=get_version_status(version, tracked.target_version),
            )
        rows.append(row)
    return rows
