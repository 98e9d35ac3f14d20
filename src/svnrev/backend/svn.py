"""Subversion backend built on the ``svn`` command-line client."""

from __future__ import annotations

import logging
import re
import subprocess
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence

from svnrev.status.errors import NotWorkingCopyError, StatusBackendError
from svnrev.status.models import Depth, StatusRecord, StatusType

from .base import RepositoryInfo

LOGGER = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]

# E155007/W155007: not a working copy, E155010/W155010: node not found.
_NOT_WORKING_COPY = re.compile(r"\b[EW]1550(?:07|10)\b")


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise StatusBackendError(f"Invalid revision number in svn output: {value!r}") from exc


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise StatusBackendError(f"Invalid date in svn output: {value!r}") from exc


def _is_change(element: Optional[ET.Element]) -> bool:
    if element is None:
        return False
    return (
        element.get("item", "none") != StatusType.NONE.value
        or element.get("props", "none") != StatusType.NONE.value
    )


def _parse_xml(text: str, command: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise StatusBackendError(f"Unable to parse `svn {command}` output: {exc}") from exc


def parse_status_xml(text: str) -> Iterator[StatusRecord]:
    """Yield status records from ``svn status --xml`` output.

    Args:
        text: XML document written by ``svn status --xml``.

    Yields:
        StatusRecord: One record per ``<entry>`` element, including entries
            grouped under ``<changelist>`` elements.

    Raises:
        StatusBackendError: If the document cannot be parsed.
    """
    root = _parse_xml(text, "status")
    # Changelist groups carry no <against>; they share the target's.
    document_against = root.find("target/against")
    for group in root.findall("target") + root.findall("changelist"):
        against = group.find("against")
        if against is None:
            against = document_against
        against_revision = _parse_int(against.get("revision")) if against is not None else None
        for entry in group.findall("entry"):
            wc_status = entry.find("wc-status")
            if wc_status is None:
                continue
            commit = wc_status.find("commit")
            repository_changed_revision = None
            if _is_change(entry.find("repos-status")):
                repository_changed_revision = against_revision
            yield StatusRecord(
                path=entry.get("path"),
                local_status=wc_status.get("item", StatusType.NONE.value),
                properties_status=wc_status.get("props", StatusType.NONE.value),
                revision=_parse_int(wc_status.get("revision")),
                changed_revision=_parse_int(commit.get("revision")) if commit is not None else None,
                changed_date=_parse_date(commit.findtext("date")) if commit is not None else None,
                repository_changed_revision=repository_changed_revision,
            )


def parse_info_xml(text: str) -> RepositoryInfo:
    """Return the repository location from ``svn info --xml`` output.

    Raises:
        StatusBackendError: If the document is malformed or incomplete.
    """
    root = _parse_xml(text, "info")
    entry = root.find("entry")
    if entry is None:
        raise StatusBackendError("`svn info` output does not contain an entry.")
    url = entry.findtext("url")
    repository_root = entry.findtext("repository/root")
    if not url or not repository_root:
        raise StatusBackendError("`svn info` output does not contain the repository location.")
    return RepositoryInfo(root=repository_root.strip(), url=url.strip())


class SvnClient:
    """Status source that shells out to the Subversion command-line client."""

    def __init__(self, executable: str = "svn", runner: Runner | None = None) -> None:
        self.executable = executable
        self._runner = runner or subprocess.run

    def status(
        self,
        path: Path,
        *,
        depth: Depth = Depth.INFINITY,
        report_ignored: bool = False,
        remote: bool = False,
    ) -> Iterator[StatusRecord]:
        """Yield one status record per path visited by ``svn status``.

        Args:
            path: Working-copy file or directory to inspect.
            depth: Depth of the status walk.
            report_ignored: Whether ignored items are included.
            remote: Whether to contact the repository for out-of-date information.

        Raises:
            NotWorkingCopyError: If ``path`` is not a working copy.
            StatusBackendError: If ``svn`` fails for any other reason.
        """
        args = ["status", "--xml", "--verbose", "--depth", Depth(depth).value]
        if report_ignored:
            args.append("--no-ignore")
        if remote:
            args.append("--show-updates")
        args.append(str(path))
        return parse_status_xml(self._run(args))

    def info(self, path: Path) -> RepositoryInfo:
        """Return the repository root and URL of ``path``.

        Raises:
            NotWorkingCopyError: If ``path`` is not a working copy.
            StatusBackendError: If ``svn`` fails for any other reason.
        """
        return parse_info_xml(self._run(["info", "--xml", str(path)]))

    def _run(self, args: Sequence[str]) -> str:
        command = [self.executable, "--non-interactive", *args]
        LOGGER.debug("Running %s", " ".join(command))
        try:
            completed = self._runner(command, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise StatusBackendError(f"Unable to run {self.executable}: {exc}") from exc

        stderr = (completed.stderr or "").strip()
        if _NOT_WORKING_COPY.search(stderr):
            raise NotWorkingCopyError(stderr)
        if completed.returncode != 0:
            message = stderr or f"exit status {completed.returncode}"
            raise StatusBackendError(f"`svn {args[0]}` failed: {message}")
        if stderr:
            LOGGER.warning("svn %s: %s", args[0], stderr)
        return completed.stdout or ""


__all__ = ["SvnClient", "parse_info_xml", "parse_status_xml"]
