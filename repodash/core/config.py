"""Configuration management for repodash."""
import json
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

DEFAULT_TRACKED_PACKAGES = [
    '@rsbuild/core',
    'jest',
    'prettier',
    'typescript',
    'react',
    'cozy-client',
    'cozy-ui',
]


@dataclass
class PathConfig:
    """File path configuration for the settings file and the snapshot files."""
    base_data_dir: Path = field(default_factory=lambda: Path('data'))

    @property
    def repositories_config_path(self) -> Path:
        return self.base_data_dir / 'repositories.json'

    @property
    def snapshot_dir(self) -> Path:
        return self.base_data_dir / 'cache'


@dataclass
class GitHubConfig:
    token: str | None = field(
        default_factory=lambda: os.getenv('GITHUB_TOKEN'),
    )
    api_base_url: str = 'https://api.github.com'
    # Only runs of this workflow on this branch are kept
    workflow_name: str = field(
        default_factory=lambda: os.getenv('REPODASH_WORKFLOW_NAME', 'CI/CD'),
    )
    branch: str = field(
        default_factory=lambda: os.getenv('REPODASH_BRANCH', 'master'),
    )
    manifest_path: str = 'package.json'
    per_page: int = 100
    timeout: int = 20

    def __repr__(self) -> str:
        return (
            f"GitHubConfig(token='*****', api_base_url={self.api_base_url!r}, "
            f"workflow_name={self.workflow_name!r}, branch={self.branch!r}, "
            f"manifest_path={self.manifest_path!r}, per_page={self.per_page!r}, "
            f"timeout={self.timeout!r})"
        )


@dataclass
class CacheConfig:
    ttl: float = field(
        default_factory=lambda: float(
            os.getenv('REPODASH_CACHE_TTL', '3600'),
        ),
    )


class RepositoryTarget(BaseModel):
    """One monitored repository, as listed in repositories.json."""
    owner: str
    repo: str

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class TrackedPackage(BaseModel):
    name: str
    target_version: str | None = Field(alias='targetVersion', default=None)

    model_config = ConfigDict(populate_by_name=True)


class DashboardSettings(BaseModel):
    """Contents of data/repositories.json."""
    repositories: list[RepositoryTarget] = Field(default_factory=list)
    tracked_packages: list[TrackedPackage] = Field(
        alias='trackedPackages',
        default_factory=lambda: [
            TrackedPackage(name=name) for name in DEFAULT_TRACKED_PACKAGES
        ],
    )

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    @classmethod
    def from_file(cls, path: Path) -> 'DashboardSettings':
        if not path.exists():
            raise ValueError(f"Repository configuration not found: {path}")
        try:
            with open(path, encoding='utf-8') as f:
                return cls.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Invalid repository configuration {path}: {e}")


@dataclass
class RepodashConfig:
    paths: PathConfig = field(default_factory=PathConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    def load_settings(self) -> DashboardSettings:
        return DashboardSettings.from_file(self.paths.repositories_config_path)

    @classmethod
    def load(cls) -> 'RepodashConfig':
        return cls()


_config: RepodashConfig | None = None


def get_config() -> RepodashConfig:
    global _config
    if _config is None:
        _config = RepodashConfig.load()
    return _config
