from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator

from repodash.utils.dates import parse_timestamp

# Longest plausible run; anything outside (0, MAX) is an upstream timestamp glitch
MAX_VALID_DURATION_SECONDS = 86400


class WorkflowRunRecord(BaseModel):
    """One completed CI run of the monitored workflow on the monitored branch."""
    id: int
    repo_full_name: str
    repo_name: str
    name: str
    workflow_id: int | None = None
    status: str | None = None
    conclusion: str | None = None
    run_number: int = 0
    event: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    run_started_at: datetime | None = None
    duration_seconds: float = 0.0
    html_url: str | None = None
    head_branch: str | None = None

    model_config = ConfigDict(extra='ignore')

    @field_validator('created_at', 'updated_at', 'run_started_at', mode='before')
    @classmethod
    def parse_datetime(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @property
    def has_valid_duration(self) -> bool:
        return 0 < self.duration_seconds < MAX_VALID_DURATION_SECONDS
