from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator

from repodash.utils.dates import parse_timestamp


class ReleaseAuthor(BaseModel):
    login: str
    avatar_url: str | None = None

    model_config = ConfigDict(extra='ignore')


class ReleaseRecord(BaseModel):
    """One GitHub release, flattened and tagged with its repository."""
    id: int = 0
    repo_full_name: str
    repo_name: str
    tag_name: str
    name: str | None = None
    body: str | None = None
    prerelease: bool = False
    draft: bool = False
    created_at: datetime | None = None
    published_at: datetime | None = None
    html_url: str | None = None
    author: ReleaseAuthor | None = None

    model_config = ConfigDict(extra='ignore')

    @field_validator('published_at', 'created_at', mode='before')
    @classmethod
    def parse_datetime(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @property
    def released_at(self) -> datetime | None:
        """Publish date, falling back to creation date for unpublished releases."""
        return self.published_at or self.created_at
