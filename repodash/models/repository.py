from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from repodash.utils.dates import parse_timestamp


class RepositoryOwner(BaseModel):
    login: str
    avatar_url: str | None = None
    html_url: str | None = None

    model_config = ConfigDict(extra='ignore')


class RepositoryLicense(BaseModel):
    key: str | None = None
    name: str | None = None
    spdx_id: str | None = None

    model_config = ConfigDict(extra='ignore')


class RepositorySnapshot(BaseModel):
    """One monitored repository as stored in repositories.json."""
    id: int
    name: str
    full_name: str
    description: str | None = None
    html_url: str | None = None
    homepage: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None
    topics: list[str] = Field(default_factory=list)
    license: RepositoryLicense | None = None
    owner: RepositoryOwner

    model_config = ConfigDict(extra='ignore')

    @field_validator('created_at', 'updated_at', 'pushed_at', mode='before')
    @classmethod
    def parse_datetime(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_validator('topics', mode='before')
    @classmethod
    def default_topics(cls, v: Any) -> list[str]:
        return v or []
