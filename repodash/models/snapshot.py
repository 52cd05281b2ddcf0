from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from repodash.models.package import PackageManifestSnapshot
from repodash.models.release import ReleaseRecord
from repodash.models.repository import RepositorySnapshot
from repodash.models.workflow_run import WorkflowRunRecord


class SnapshotMetadata(BaseModel):
    last_updated: datetime | None = Field(alias='lastUpdated', default=None)

    model_config = ConfigDict(populate_by_name=True)


class RepositoryBundle(BaseModel):
    """Everything fetched for a single repository in one cycle."""
    repository: RepositorySnapshot
    releases: list[ReleaseRecord] = Field(default_factory=list)
    workflow_runs: list[WorkflowRunRecord] = Field(default_factory=list)
    package: PackageManifestSnapshot | None = None


class Snapshot(BaseModel):
    """The four collections produced by one fetch cycle."""
    repositories: list[RepositorySnapshot] = Field(default_factory=list)
    releases: list[ReleaseRecord] = Field(default_factory=list)
    workflow_runs: list[WorkflowRunRecord] = Field(default_factory=list)
    packages: list[PackageManifestSnapshot] = Field(default_factory=list)

    def add(self, bundle: RepositoryBundle) -> None:
        self.repositories.append(bundle.repository)
        self.releases.extend(bundle.releases)
        self.workflow_runs.extend(bundle.workflow_runs)
        if bundle.package is not None:
            self.packages.append(bundle.package)
