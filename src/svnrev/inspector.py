"""Inspect configured entries and turn their status streams into summaries."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import tzinfo
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from pydantic import BaseModel

from svnrev.backend.base import StatusSource
from svnrev.config.models import EntryConfig
from svnrev.properties import summary_properties
from svnrev.status import (
    NotWorkingCopyError,
    StatusBackendError,
    StatusRecord,
    Summary,
    aggregate,
    empty_summary,
)
from svnrev.status.models import status_name

LOGGER = logging.getLogger(__name__)


class EntryReport(BaseModel):
    """Result of inspecting one entry.

    Attributes:
        entry: Entry configuration that was inspected.
        prefix: Namespace used for the entry's properties.
        summary: Aggregated state of the entry.
        properties: Ordered property values derived from the summary.
    """

    entry: EntryConfig
    prefix: str
    summary: Summary
    properties: Dict[str, str]


def default_entry(base: Path) -> EntryConfig:
    """Return the entry inspected when no entries are configured."""
    return EntryConfig(path=base)


class EntryInspector:
    """Collect status for entries and apply the error policy."""

    def __init__(
        self,
        source: StatusSource,
        *,
        fail_on_error: bool = True,
        max_workers: int = 1,
        verbose: bool = False,
        tz: tzinfo | None = None,
    ) -> None:
        self.source = source
        self.fail_on_error = fail_on_error
        self.max_workers = max(1, max_workers)
        self.verbose = verbose
        self.tz = tz

    def run(self, entries: Iterable[EntryConfig]) -> List[EntryReport]:
        """Inspect every entry and return reports in the given order."""
        pending = list(entries)
        if self.max_workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                summaries = list(pool.map(self.inspect, pending))
        else:
            summaries = [self.inspect(entry) for entry in pending]

        return [
            EntryReport(
                entry=entry,
                prefix=entry.resolved_prefix,
                summary=summary,
                properties=summary_properties(summary, self.tz),
            )
            for entry, summary in zip(pending, summaries)
        ]

    def inspect(self, entry: EntryConfig) -> Summary:
        """Return the summary of one entry.

        Raises:
            StatusBackendError: If the backend fails and ``fail_on_error`` is set.
        """
        path = entry.path.expanduser()
        kind = "file" if path.is_file() else "directory" if path.is_dir() else "path"
        LOGGER.info("Inspecting %s %s", kind, path)
        self._detail("  prefix = %s", entry.resolved_prefix)
        self._detail("  depth = %s", entry.depth.value)
        self._detail("  report unversioned = %s", entry.report_unversioned)
        self._detail("  report ignored = %s", entry.report_ignored)
        self._detail("  report out-of-date = %s", entry.report_out_of_date)

        try:
            records = self.source.status(
                path,
                depth=entry.depth,
                report_ignored=entry.report_ignored,
                remote=entry.report_out_of_date,
            )
            summary = aggregate(entry, self._trace(records))
            if not summary.has_repository:
                summary = self._fill_repository(path, summary)
        except NotWorkingCopyError as exc:
            self._detail("%s is not under version control: %s", path, exc)
            summary = empty_summary(entry)
        except StatusBackendError as exc:
            if self.fail_on_error:
                raise
            LOGGER.error("Unable to collect status for %s: %s", path, exc)
            summary = empty_summary(entry)

        if summary.unrecognized_statuses:
            LOGGER.warning(
                "The following svn statuses are not taken into account for %s: %s",
                path,
                ", ".join(summary.unrecognized_statuses),
            )
        return summary

    def _fill_repository(self, path: Path, summary: Summary) -> Summary:
        try:
            info = self.source.info(path)
        except NotWorkingCopyError:
            return summary
        return summary.model_copy(
            update={"repository_root": info.root, "repository_path": info.path}
        )

    def _trace(self, records: Iterable[StatusRecord]) -> Iterator[StatusRecord]:
        for record in records:
            if self.verbose and LOGGER.isEnabledFor(logging.DEBUG):
                LOGGER.debug(
                    "  %-11s %-11s %6s %6s %6s  %s",
                    status_name(record.local_status),
                    status_name(record.properties_status),
                    "" if record.revision is None else record.revision,
                    "" if record.changed_revision is None else record.changed_revision,
                    ""
                    if record.repository_changed_revision is None
                    else record.repository_changed_revision,
                    record.path or "",
                )
            yield record

    def _detail(self, message: str, *args: object) -> None:
        LOGGER.log(logging.INFO if self.verbose else logging.DEBUG, message, *args)


__all__ = ["EntryInspector", "EntryReport", "default_entry"]
