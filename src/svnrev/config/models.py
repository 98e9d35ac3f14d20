"""Configuration models describing svnrev settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from svnrev.status.models import Depth


class SvnRevBaseModel(BaseModel):
    """Shared configuration for svnrev Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class EntryConfig(SvnRevBaseModel):
    """A file or directory to inspect together with its report options.

    Attributes:
        path: Local path of the entry.
        prefix: Namespace for the entry's output properties. Defaults to the
            name of the resolved path.
        depth: Depth of items below ``path`` whose status is collected.
        report_unversioned: Whether unversioned items surface in the status code.
        report_ignored: Whether ignored items surface in the status code.
        report_out_of_date: Whether to check the remote repository and report
            out-of-date items.
    """

    path: Path = Path(".")
    prefix: Optional[str] = None
    depth: Depth = Depth.INFINITY
    report_unversioned: bool = True
    report_ignored: bool = False
    report_out_of_date: bool = False

    @field_validator("prefix")
    @classmethod
    def _prefix_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("entry prefix must not be blank")
        return value

    @property
    def resolved_prefix(self) -> str:
        """Return the configured prefix or the name of the entry path."""
        if self.prefix:
            return self.prefix
        return self.path.expanduser().resolve().name or "root"


class SvnSettings(SvnRevBaseModel):
    """Subversion client settings.

    Attributes:
        executable: Name or path of the ``svn`` command-line client.
    """

    executable: str = "svn"


class OutputSettings(SvnRevBaseModel):
    """Settings controlling how summaries are published.

    Attributes:
        separator: Text placed between an entry prefix and a property key.
        properties_file: Optional ``.properties`` file receiving all values.
    """

    separator: str = "."
    properties_file: Optional[Path] = None


class RuntimeSettings(SvnRevBaseModel):
    """Execution settings.

    Attributes:
        max_workers: Number of entries inspected concurrently.
    """

    max_workers: int = Field(default=1, ge=1)


class LoggingSettings(SvnRevBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Name of a standard logging level, such as ``INFO``.
    """

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown logging level {value!r}")
        return name


class SvnRevConfig(SvnRevBaseModel):
    """Top-level configuration struct for svnrev.

    Attributes:
        entries: Entries to inspect; the current directory is used when empty.
        fail_on_error: Whether backend failures abort the run instead of
            degrading to an unversioned summary.
        verbose: Whether per-entry details are logged at INFO level.
        svn: Subversion client settings.
        output: Output publishing settings.
        runtime: Execution settings.
        logging: Logging configuration.
    """

    entries: List[EntryConfig] = Field(default_factory=list)
    fail_on_error: bool = True
    verbose: bool = False
    svn: SvnSettings = Field(default_factory=SvnSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "SvnRevBaseModel",
    "EntryConfig",
    "SvnSettings",
    "OutputSettings",
    "RuntimeSettings",
    "LoggingSettings",
    "SvnRevConfig",
]
