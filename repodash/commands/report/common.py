import asyncio
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from repodash.core.container import get_container
from repodash.core.storage import SnapshotReader
from repodash.models.package import PackageManifestSnapshot
from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.models.snapshot import SnapshotMetadata
from repodash.models.workflow_run import WorkflowRunRecord
from repodash.utils.formatting import format_relative_time


@dataclass
class DashboardData:
    repositories: list[RepositorySnapshot]
    releases: list[ReleaseRecord]
    workflow_runs: list[WorkflowRunRecord]
    packages: list[PackageManifestSnapshot]
    metadata: SnapshotMetadata


async def _load(reader: SnapshotReader) -> DashboardData:
    repositories, releases, workflow_runs, packages, metadata = await asyncio.gather(
        reader.get_repositories(),
        reader.get_releases(),
        reader.get_workflow_runs(),
        reader.get_packages(),
        reader.get_metadata(),
    )
    return DashboardData(repositories, releases, workflow_runs, packages, metadata)


def load_dashboard_data(data_dir: Path | None = None) -> DashboardData:
    """Read the current snapshot; each report invocation starts from fresh files."""
    container = get_container()
    container.use_data_dir(data_dir)
    reader = container.create_snapshot_reader()
    reader.refresh()
    return asyncio.run(_load(reader))


def print_last_updated(console: Console, metadata: SnapshotMetadata) -> None:
    if metadata.last_updated is None:
        console.print('[dim]Last updated: unknown (no snapshot metadata)[/dim]')
    else:
        console.print(
            f"[dim]Last updated: {metadata.last_updated.isoformat()} "
            f"({format_relative_time(metadata.last_updated)})[/dim]",
        )
