import json
import time
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any

import requests
import structlog

from repodash.core.config import GitHubConfig
from repodash.core.config import RepositoryTarget
from repodash.core.stats import FetchStats
from repodash.models.package import PackageManifestSnapshot
from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.models.snapshot import RepositoryBundle
from repodash.models.snapshot import Snapshot
from repodash.models.workflow_run import WorkflowRunRecord
from repodash.services.github_service import GitHubService
from repodash.utils.dates import parse_timestamp

logger = structlog.get_logger('snapshot_service')

# Anything a single request or its normalisation can raise
FETCH_ERRORS = (
    requests.RequestException, ValueError, KeyError, TypeError, AttributeError,
)


def compute_duration_seconds(run: dict[str, Any]) -> float:
    """Wall-clock seconds between run start (or creation) and the last update."""
    started_at = parse_timestamp(run.get('run_started_at') or run.get('created_at'))
    updated_at = parse_timestamp(run.get('updated_at'))
    if started_at is None or updated_at is None:
        return 0.0
    return (updated_at - started_at).total_seconds()


def normalize_repository(data: dict[str, Any]) -> RepositorySnapshot:
    owner = data['owner']
    return RepositorySnapshot(
        id=data['id'],
        name=data['name'],
        full_name=data['full_name'],
        description=data.get('description'),
        html_url=data.get('html_url'),
        homepage=data.get('homepage'),
        language=data.get('language'),
        stargazers_count=data.get('stargazers_count', 0),
        watchers_count=data.get('watchers_count', 0),
        forks_count=data.get('forks_count', 0),
        open_issues_count=data.get('open_issues_count', 0),
        created_at=data.get('created_at'),
        updated_at=data.get('updated_at'),
        pushed_at=data.get('pushed_at'),
        topics=data.get('topics') or [],
        license=data.get('license'),
        owner={
            'login': owner['login'],
            'avatar_url': owner.get('avatar_url'),
            'html_url': owner.get('html_url'),
        },
    )


def normalize_release(data: dict[str, Any], repository: RepositorySnapshot) -> ReleaseRecord:
    author = data.get('author')
    return ReleaseRecord(
        id=data.get('id', 0),
        repo_full_name=repository.full_name,
        repo_name=repository.name,
        tag_name=data['tag_name'],
        name=data.get('name'),
        body=data.get('body'),
        prerelease=bool(data.get('prerelease')),
        draft=bool(data.get('draft')),
        created_at=data.get('created_at'),
        published_at=data.get('published_at'),
        html_url=data.get('html_url'),
        author={
            'login': author['login'],
            'avatar_url': author.get('avatar_url'),
        } if author else None,
    )


def normalize_workflow_run(data: dict[str, Any], repository: RepositorySnapshot) -> WorkflowRunRecord:
    return WorkflowRunRecord(
        id=data['id'],
        repo_full_name=repository.full_name,
        repo_name=repository.name,
        name=data.get('name') or '',
        workflow_id=data.get('workflow_id'),
        status=data.get('status'),
        conclusion=data.get('conclusion'),
        run_number=data.get('run_number', 0),
        event=data.get('event'),
        created_at=data.get('created_at'),
        updated_at=data.get('updated_at'),
        run_started_at=data.get('run_started_at'),
        duration_seconds=compute_duration_seconds(data),
        html_url=data.get('html_url'),
        head_branch=data.get('head_branch'),
    )


def _engines(manifest: dict[str, Any]) -> dict[str, Any]:
    engines = manifest.get('engines')
    # The legacy array form (["node >= 0.4"]) carries no usable versions
    return engines if isinstance(engines, dict) else {}


def _package_manager(manifest: dict[str, Any]) -> str | None:
    package_manager = manifest.get('packageManager')
    return package_manager if isinstance(package_manager, str) else None


def extract_yarn_version(manifest: dict[str, Any]) -> str | None:
    engines = _engines(manifest)
    if engines.get('yarn'):
        return engines['yarn']
    package_manager = _package_manager(manifest) or ''
    if package_manager.startswith('yarn@'):
        # "yarn@3.6.4+sha224.abc" -> "3.6.4"
        return package_manager.split('@', 1)[1].split('+', 1)[0]
    return None


def normalize_package_manifest(manifest: dict[str, Any], repository: RepositorySnapshot) -> PackageManifestSnapshot:
    if not isinstance(manifest, dict):
        raise ValueError('Manifest is not a JSON object')
    engines = _engines(manifest)
    return PackageManifestSnapshot(
        repo_full_name=repository.full_name,
        repo_name=repository.name,
        dependencies=manifest.get('dependencies') or {},
        dev_dependencies=manifest.get('devDependencies') or {},
        node_version=engines.get('node'),
        yarn_version=extract_yarn_version(manifest),
        package_manager=_package_manager(manifest),
    )


class SnapshotService:
    """Fetches and normalises one snapshot, one repository at a time."""

    def __init__(self, service: GitHubService, github_config: GitHubConfig):
        self.service = service
        self.config = github_config

    def fetch_repository(self, target: RepositoryTarget, stats: FetchStats | None = None) -> RepositoryBundle | None:
        """
        Fetch all data kinds for one repository.

        Returns None when the repository metadata itself cannot be fetched;
        any other failing data kind is logged and left empty.
        """
        stats = stats or FetchStats()
        owner, repo = target.owner, target.repo
        start_time = time.time()

        try:
            repository = normalize_repository(
                self.service.get_repository(owner, repo),
            )
        except FETCH_ERRORS as e:
            logger.error(
                'Failed to fetch repository',
                repo=target.full_name, error=str(e),
            )
            stats.inc_failed()
            return None

        bundle = RepositoryBundle(repository=repository)

        bundle.releases = self._fetch_kind(
            'releases', target, stats, [],
            lambda: [
                normalize_release(r, repository)
                for r in self.service.get_releases(owner, repo)
            ],
        )
        bundle.workflow_runs = self._fetch_kind(
            'workflow runs', target, stats, [],
            lambda: [
                normalize_workflow_run(r, repository)
                for r in self.service.get_workflow_runs(owner, repo)
                if self._is_monitored_run(r)
            ],
        )
        bundle.package = self._fetch_kind(
            'package manifest', target, stats, None,
            lambda: normalize_package_manifest(
                json.loads(
                    self.service.get_file_content(
                        owner, repo, self.config.manifest_path,
                    ),
                ),
                repository,
            ),
        )

        stats.inc_fetched()
        stats.releases += len(bundle.releases)
        stats.workflow_runs += len(bundle.workflow_runs)
        stats.packages += 1 if bundle.package else 0

        elapsed = time.time() - start_time
        logger.info(
            'Repository fetched',
            repo=repository.full_name,
            releases=len(bundle.releases),
            workflow_runs=len(bundle.workflow_runs),
            package=bundle.package is not None,
            elapsed=f"{elapsed:.3f}s",
        )
        return bundle

    def run(
        self,
        targets: Iterable[RepositoryTarget],
        stats: FetchStats | None = None,
        on_progress: Callable[[RepositoryTarget], None] | None = None,
    ) -> Snapshot:
        """Fetch every target in order; per-repository failures never stop the cycle."""
        stats = stats or FetchStats()
        snapshot = Snapshot()
        for target in targets:
            bundle = self.fetch_repository(target, stats)
            if bundle is not None:
                snapshot.add(bundle)
            if on_progress:
                on_progress(target)
        return snapshot

    def _is_monitored_run(self, run: dict[str, Any]) -> bool:
        return (
            run.get('name') == self.config.workflow_name
            and run.get('head_branch') == self.config.branch
        )

    def _fetch_kind(self, kind: str, target: RepositoryTarget, stats: FetchStats, default: Any, fetch: Callable[[], Any]) -> Any:
        try:
            return fetch()
        except FETCH_ERRORS as e:
            # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
            logger.error(
                f"Failed to fetch {kind}",
                repo=target.full_name, error=str(e),
            )
            stats.inc_degraded()
            return default
