"""Data models describing working-copy status observations and summaries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, FrozenSet, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class StatusType(str, Enum):
    """Classification of a single path's local or remote state."""

    NONE = "none"
    NORMAL = "normal"
    ADDED = "added"
    CONFLICTED = "conflicted"
    DELETED = "deleted"
    IGNORED = "ignored"
    MODIFIED = "modified"
    REPLACED = "replaced"
    EXTERNAL = "external"
    UNVERSIONED = "unversioned"
    MISSING = "missing"
    INCOMPLETE = "incomplete"
    OBSTRUCTED = "obstructed"

    def __str__(self) -> str:
        return self.value


class Depth(str, Enum):
    """How far below an entry path the status walk descends."""

    EMPTY = "empty"
    FILES = "files"
    IMMEDIATES = "immediates"
    INFINITY = "infinity"

    def __str__(self) -> str:
        return self.value


# Backends may report status names this release does not know about; they are
# carried as plain strings so the renderer can diagnose them.
StatusValue = Annotated[Union[StatusType, str], Field(union_mode="left_to_right")]


def status_name(value: StatusValue) -> str:
    """Return the textual name of a known or unknown status value."""
    return value.value if isinstance(value, StatusType) else str(value)


class StatusRecord(BaseModel):
    """One status observation for a visited path.

    Attributes:
        path: Visited path, used only for diagnostics.
        local_status: Working-copy classification of the path itself.
        properties_status: Classification of the path's properties.
        revision: Working revision of the path.
        changed_revision: Revision at which the path was last committed.
        changed_date: Commit date paired with ``changed_revision``.
        repository_changed_revision: Latest revision known remotely.
        repository_root: Root URL of the repository.
        repository_relative_path: Path of the node relative to the root.
    """

    model_config = ConfigDict(frozen=True)

    path: Optional[str] = None
    local_status: StatusValue
    properties_status: StatusValue = StatusType.NONE
    revision: Optional[int] = None
    changed_revision: Optional[int] = None
    changed_date: Optional[datetime] = None
    repository_changed_revision: Optional[int] = None
    repository_root: Optional[str] = None
    repository_relative_path: Optional[str] = None


class Summary(BaseModel):
    """Aggregated version-control state of one inspected entry.

    Attributes:
        repository_root: Root URL of the repository, empty when unknown.
        repository_path: Entry path relative to the repository root.
        max_revision: Highest working revision, ``-1`` when none was seen.
        min_revision: Lowest positive working revision, ``-1`` when none was seen.
        mixed_revisions: Whether two distinct positive working revisions were seen.
        max_committed_revision: Highest committed revision, ``-1`` when none was seen.
        committed_date: Commit date of the record supplying ``max_committed_revision``.
        out_of_date: Whether any path is behind the remote repository.
        status_types: Status types observed while folding.
        status_code: Status code in the default encoding.
        special_status_code: Status code in the special encoding.
        unrecognized_statuses: Observed status names the renderer does not know.
        record_count: Number of status records folded into the summary.
    """

    model_config = ConfigDict(frozen=True)

    repository_root: str = ""
    repository_path: str = ""
    max_revision: int = -1
    min_revision: int = -1
    mixed_revisions: bool = False
    max_committed_revision: int = -1
    committed_date: Optional[datetime] = None
    out_of_date: bool = False
    status_types: FrozenSet[StatusValue] = frozenset()
    status_code: str = ""
    special_status_code: str = ""
    unrecognized_statuses: Tuple[str, ...] = ()
    record_count: int = 0

    @property
    def has_repository(self) -> bool:
        """Return whether the repository identity is known."""
        return bool(self.repository_root or self.repository_path)


__all__ = [
    "Depth",
    "StatusRecord",
    "StatusType",
    "StatusValue",
    "Summary",
    "status_name",
]
