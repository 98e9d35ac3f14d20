"""Publish entry summaries as named build properties."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

from svnrev.status.models import Summary

LOGGER = logging.getLogger(__name__)

PROPERTY_KEYS = (
    "repository",
    "path",
    "revision",
    "mixedRevisions",
    "committedRevision",
    "committedDate",
    "status",
    "specialStatus",
)

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_committed_date(value: Optional[datetime], tz: tzinfo | None = None) -> str:
    """Format a commit date as ``2010-01-02 13:14:15 +0100 (Sat, 02 Jan 2010)``.

    Args:
        value: Commit date to format; ``None`` yields an empty string.
        tz: Timezone to render in. Defaults to the local timezone.

    Returns:
        str: Formatted date using English day and month names.
    """
    if value is None:
        return ""
    local = value.astimezone(tz)
    return "{} {} ({}, {:02d} {} {:04d})".format(
        local.strftime("%Y-%m-%d %H:%M:%S"),
        local.strftime("%z"),
        _WEEKDAYS[local.weekday()],
        local.day,
        _MONTHS[local.month - 1],
        local.year,
    )


def summary_properties(summary: Summary, tz: tzinfo | None = None) -> Dict[str, str]:
    """Return the ordered property values describing ``summary``."""
    return {
        "repository": summary.repository_root,
        "path": summary.repository_path,
        "revision": str(summary.max_revision),
        "mixedRevisions": "true" if summary.mixed_revisions else "false",
        "committedRevision": str(summary.max_committed_revision),
        "committedDate": format_committed_date(summary.committed_date, tz),
        "status": summary.status_code,
        "specialStatus": summary.special_status_code,
    }


class PropertyStore:
    """Ordered collection of published properties."""

    def __init__(
        self,
        properties: MutableMapping[str, str] | None = None,
        *,
        separator: str = ".",
        verbose: bool = False,
    ) -> None:
        self._properties: MutableMapping[str, str] = properties if properties is not None else {}
        self.separator = separator
        self.verbose = verbose

    def set(self, name: str, value: str) -> None:
        """Set a property, overwriting and reporting any previous value."""
        if name in self._properties:
            LOGGER.log(
                logging.WARNING if self.verbose else logging.DEBUG,
                "The %r property is already defined and will be overwritten. Two entries may "
                "share the same prefix, or the property was defined by another tool.",
                name,
            )
        self._properties[name] = value
        LOGGER.debug("  %s = %s", name, value)

    def publish(self, prefix: str, properties: Mapping[str, str]) -> None:
        """Set every property of ``properties`` under ``prefix``."""
        for key, value in properties.items():
            self.set(f"{prefix}{self.separator}{key}", value)

    def as_dict(self) -> Dict[str, str]:
        """Return a copy of the published properties."""
        return dict(self._properties)


def _escape(text: str, *, is_key: bool) -> str:
    escaped = []
    for index, char in enumerate(text):
        if char == "\\":
            escaped.append("\\\\")
        elif char == "\t":
            escaped.append("\\t")
        elif char == "\n":
            escaped.append("\\n")
        elif char == "\r":
            escaped.append("\\r")
        elif char == "\f":
            escaped.append("\\f")
        elif char in "=:#!":
            escaped.append("\\" + char)
        elif char == " " and (is_key or index == 0):
            escaped.append("\\ ")
        elif ord(char) < 0x20 or ord(char) > 0x7E:
            encoded = char.encode("utf-16-be")
            for offset in range(0, len(encoded), 2):
                escaped.append(f"\\u{int.from_bytes(encoded[offset:offset + 2], 'big'):04x}")
        else:
            escaped.append(char)
    return "".join(escaped)


def write_properties_file(path: Path, properties: Mapping[str, str]) -> None:
    """Write ``properties`` as a Java-style ``.properties`` file.

    Characters outside printable ASCII are written as ``\\uXXXX`` escapes so
    the file stays readable as ISO-8859-1.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    lines = ["# svnrev properties", f"# Last updated: {stamp}"]
    lines.extend(
        f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}"
        for key, value in properties.items()
    )
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")


__all__ = [
    "PROPERTY_KEYS",
    "PropertyStore",
    "format_committed_date",
    "summary_properties",
    "write_properties_file",
]
