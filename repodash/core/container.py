"""Dependency Injection Container."""
from pathlib import Path
from typing import Optional

from repodash.core.cache import TTLCache
from repodash.core.config import get_config
from repodash.core.config import PathConfig
from repodash.core.config import RepodashConfig
from repodash.core.storage import SnapshotReader
from repodash.core.storage import SnapshotWriter
from repodash.services.github_service import GitHubService
from repodash.services.snapshot_service import SnapshotService


class Container:
    """Simple DI Container to manage service lifecycles."""

    _instance: Optional['Container'] = None

    def __init__(self, config: RepodashConfig | None = None) -> None:
        self.config: RepodashConfig = config or get_config()
        self._github_service: GitHubService | None = None
        self._cache: TTLCache | None = None

    @classmethod
    def get_instance(cls) -> 'Container':
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    def use_data_dir(self, data_dir: Path | None) -> None:
        """Point every path at another data directory (CLI --data-dir)."""
        if data_dir is not None:
            self.config.paths = PathConfig(base_data_dir=data_dir)

    # -- Shared state (Singletons) --

    def get_cache(self) -> TTLCache:
        if self._cache is None:
            self._cache = TTLCache(default_ttl=self.config.cache.ttl)
        return self._cache

    def get_github_service(self, token: str | None = None) -> GitHubService:
        """Token is optional; unauthenticated requests get GitHub's lower rate limit."""
        if not self._github_service:
            github = self.config.github
            self._github_service = GitHubService(
                token=token or github.token,
                api_base_url=github.api_base_url,
                per_page=github.per_page,
                timeout=github.timeout,
            )
        return self._github_service

    # -- Factories --

    def create_snapshot_service(self, token: str | None = None) -> SnapshotService:
        return SnapshotService(self.get_github_service(token), self.config.github)

    def create_snapshot_writer(self) -> SnapshotWriter:
        return SnapshotWriter(self.config.paths.snapshot_dir)

    def create_snapshot_reader(self) -> SnapshotReader:
        return SnapshotReader(self.config.paths.snapshot_dir, self.get_cache())

# Global Accessor


def get_container() -> Container:
    return Container.get_instance()
