import json
from datetime import datetime
from pathlib import Path
from typing import Any
from typing import TypeVar

import structlog
from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError

from repodash.core.cache import TTLCache
from repodash.models.package import PackageManifestSnapshot
from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.models.snapshot import Snapshot
from repodash.models.snapshot import SnapshotMetadata
from repodash.models.workflow_run import WorkflowRunRecord
from repodash.utils.dates import utc_now

logger = structlog.get_logger('storage')

M = TypeVar('M', bound=BaseModel)

REPOSITORIES_FILE = 'repositories.json'
RELEASES_FILE = 'releases.json'
WORKFLOW_RUNS_FILE = 'workflow-runs.json'
PACKAGES_FILE = 'packages.json'
METADATA_FILE = 'metadata.json'


class SnapshotWriter:
    """Writes a snapshot as flat JSON files, replacing whatever was there."""

    def __init__(self, snapshot_dir: str | Path):
        self.snapshot_dir = Path(snapshot_dir)

    def write(self, snapshot: Snapshot, completed_at: datetime | None = None) -> list[Path]:
        # Files are written one after another; a crash in between leaves a mixed set
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)
        metadata = SnapshotMetadata(last_updated=completed_at or utc_now())

        written = [
            self._write_json(REPOSITORIES_FILE, _dump_all(snapshot.repositories)),
            self._write_json(RELEASES_FILE, _dump_all(snapshot.releases)),
            self._write_json(WORKFLOW_RUNS_FILE, _dump_all(snapshot.workflow_runs)),
            self._write_json(PACKAGES_FILE, _dump_all(snapshot.packages)),
            self._write_json(
                METADATA_FILE, metadata.model_dump(mode='json', by_alias=True),
            ),
        ]
        logger.info(
            'Snapshot written',
            path=str(self.snapshot_dir),
            repositories=len(snapshot.repositories),
            releases=len(snapshot.releases),
            workflow_runs=len(snapshot.workflow_runs),
            packages=len(snapshot.packages),
            last_updated=metadata.model_dump(mode='json')['last_updated'],
        )
        return written

    def _write_json(self, filename: str, payload: Any) -> Path:
        path = self.snapshot_dir / filename
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write('\n')
        return path


def _dump_all(records: list[BaseModel]) -> list[dict[str, Any]]:
    return [r.model_dump(mode='json', by_alias=True) for r in records]


def load_json_file(path: str | Path) -> Any:
    with open(path, encoding='utf-8') as f:
        return json.load(f)


class SnapshotReader:
    """
    Read-side access to a written snapshot.

    Accessors go through the shared TTL cache and never raise: a missing or
    unreadable file yields an empty collection (or empty metadata).
    """

    def __init__(self, snapshot_dir: str | Path, cache: TTLCache):
        self.snapshot_dir = Path(snapshot_dir)
        self.cache = cache

    async def get_repositories(self) -> list[RepositorySnapshot]:
        return await self._get_list('repositories', REPOSITORIES_FILE, RepositorySnapshot)

    async def get_releases(self) -> list[ReleaseRecord]:
        return await self._get_list('releases', RELEASES_FILE, ReleaseRecord)

    async def get_workflow_runs(self) -> list[WorkflowRunRecord]:
        return await self._get_list('workflow-runs', WORKFLOW_RUNS_FILE, WorkflowRunRecord)

    async def get_packages(self) -> list[PackageManifestSnapshot]:
        return await self._get_list('packages', PACKAGES_FILE, PackageManifestSnapshot)

    async def get_metadata(self) -> SnapshotMetadata:
        async def load() -> SnapshotMetadata:
            path = self.snapshot_dir / METADATA_FILE
            try:
                return SnapshotMetadata.model_validate(load_json_file(path))
            except FileNotFoundError:
                logger.warning('Snapshot file missing', path=str(path))
            except (OSError, ValueError, ValidationError) as e:
                logger.error(
                    'Failed to read snapshot file',
                    path=str(path), error=str(e),
                )
            return SnapshotMetadata(last_updated=None)

        return await self.cache.get(self._cache_key('metadata'), load)

    def refresh(self) -> None:
        """Forget cached loads so the next access re-reads the files."""
        self.cache.clear()

    async def _get_list(self, key: str, filename: str, model: type[M]) -> list[M]:
        adapter = TypeAdapter(list[model])

        async def load() -> list[M]:
            path = self.snapshot_dir / filename
            try:
                return adapter.validate_python(load_json_file(path))
            except FileNotFoundError:
                logger.warning('Snapshot file missing', path=str(path))
            except (OSError, ValueError, ValidationError) as e:
                logger.error(
                    'Failed to read snapshot file',
                    path=str(path), error=str(e),
                )
            return []

        return await self.cache.get(self._cache_key(key), load)

    def _cache_key(self, name: str) -> str:
        return f"{self.snapshot_dir}:{name}"
