from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class PackageManifestSnapshot(BaseModel):
    """Dependency manifest of one repository, as stored in packages.json."""
    repo_full_name: str
    repo_name: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(
        alias='devDependencies', default_factory=dict,
    )
    node_version: str | None = Field(alias='nodeVersion', default=None)
    yarn_version: str | None = Field(alias='yarnVersion', default=None)
    package_manager: str | None = Field(alias='packageManager', default=None)

    model_config = ConfigDict(populate_by_name=True, extra='ignore')
