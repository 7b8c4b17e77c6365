"""
Data models for push payloads, change analysis, and dispatch requests.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


DISPATCH_EVENT_TYPE = 'upstream_push'
TRIGGER_SOURCE = 'webhook'


def utc_timestamp() -> str:
    """
    The current time as an ISO-8601 UTC string, eg.
    ``2024-01-01T12:00:00.000Z``
    """

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class Commit(BaseModel):
    """
    A single commit from a push event
    """

    id: str
    message: str
    added: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)


    @field_validator('added', 'modified', 'removed', mode='before')
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class Repository(BaseModel):
    full_name: str


class PushPayload(BaseModel):
    """
    The parts of a push event payload that the relay cares about
    """

    repository: Repository
    ref: str
    commits: List[Commit] = Field(default_factory=list)


    @field_validator('commits', mode='before')
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class FileCounts(BaseModel):
    added: int = 0
    modified: int = 0
    removed: int = 0


class ChangeTypes(BaseModel):
    """
    Tally of commits per classification. Every commit is counted in
    exactly one of these.
    """

    feature: int = 0
    bugfix: int = 0
    doc: int = 0
    config: int = 0
    other: int = 0


class ChangeAnalysis(BaseModel):
    """
    Summary of the commits in an accepted push event
    """

    total_changes: FileCounts = Field(default_factory=FileCounts)
    change_types: ChangeTypes = Field(default_factory=ChangeTypes)
    changed_files: List[str] = Field(default_factory=list)
    commit_count: int = 0


class ClientPayload(BaseModel):
    upstream_commit: str
    commit_message: str
    changed_files: List[str]
    timestamp: str = Field(default_factory=utc_timestamp)
    trigger_source: Literal['webhook'] = TRIGGER_SOURCE


class DispatchRequest(BaseModel):
    """
    Body of a repository dispatch call
    """

    event_type: Literal['upstream_push'] = DISPATCH_EVENT_TYPE
    client_payload: ClientPayload


class Outcome(str, Enum):
    ACCEPTED = 'accepted'
    IGNORED = 'ignored'
    AUTH_FAILED = 'auth_failed'
    MALFORMED = 'malformed'


class Evaluation(BaseModel):
    """
    The result of evaluating an inbound event. Only an ACCEPTED
    evaluation carries an analysis and a latest commit.
    """

    outcome: Outcome
    reason: Optional[str] = None
    analysis: Optional[ChangeAnalysis] = None
    latest_commit: Optional[Commit] = None


# The end.
