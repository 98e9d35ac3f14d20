"""Status backend abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from svnrev.status.models import Depth, StatusRecord


@dataclass(frozen=True)
class RepositoryInfo:
    """Repository location of a working-copy path."""

    root: str
    url: str

    @property
    def path(self) -> str:
        """Return the URL relative to the repository root."""
        return relative_repository_path(self.root, self.url)


def relative_repository_path(root: str, url: str) -> str:
    """Strip the repository root and one leading separator from ``url``."""
    path = url[len(root) :] if url.startswith(root) else url
    if path.startswith("/"):
        path = path[1:]
    return path


class StatusSource(Protocol):
    """Producer of working-copy status records."""

    def status(
        self,
        path: Path,
        *,
        depth: Depth,
        report_ignored: bool,
        remote: bool,
    ) -> Iterable[StatusRecord]:
        """Yield one status record per visited path below ``path``."""
        ...

    def info(self, path: Path) -> RepositoryInfo:
        """Return the repository location of ``path``."""
        ...
