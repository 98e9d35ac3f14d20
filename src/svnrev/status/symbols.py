"""Status-code rendering for aggregated working-copy state.

A status code is built by walking ``RENDER_ORDER`` and emitting one symbol for
every status type present in the observed set, so the output depends only on
set membership and never on the order in which paths were visited. Two symbol
tables exist: the default one follows the familiar ``svn status`` letters,
the special one replaces the punctuation glyphs with lowercase letters that
are easier to consume from build scripts.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping, NamedTuple, Tuple

from .models import StatusType, StatusValue, status_name

if TYPE_CHECKING:
    from svnrev.config.models import EntryConfig


class SymbolEncoding(str, Enum):
    """Available symbol tables."""

    DEFAULT = "default"
    SPECIAL = "special"


class SymbolTable(NamedTuple):
    """Symbols used for each renderable status type and for out-of-date entries."""

    statuses: Mapping[StatusType, str]
    out_of_date: str


RENDER_ORDER: Tuple[StatusType, ...] = (
    StatusType.ADDED,
    StatusType.CONFLICTED,
    StatusType.DELETED,
    StatusType.IGNORED,
    StatusType.MODIFIED,
    StatusType.REPLACED,
    StatusType.EXTERNAL,
    StatusType.UNVERSIONED,
    StatusType.MISSING,
    StatusType.INCOMPLETE,
    StatusType.OBSTRUCTED,
)

# Status types that carry no news and never produce a symbol.
SILENT_STATUS_TYPES = frozenset({StatusType.NONE, StatusType.NORMAL})

_DEFAULT_SYMBOLS = {
    StatusType.ADDED: "A",
    StatusType.CONFLICTED: "C",
    StatusType.DELETED: "D",
    StatusType.IGNORED: "I",
    StatusType.MODIFIED: "M",
    StatusType.REPLACED: "R",
    StatusType.EXTERNAL: "X",
    StatusType.UNVERSIONED: "?",
    StatusType.MISSING: "!",
    # shares the glyph with missing, as svn itself does
    StatusType.INCOMPLETE: "!",
    StatusType.OBSTRUCTED: "~",
}

_SPECIAL_OVERRIDES = {
    StatusType.UNVERSIONED: "u",
    StatusType.MISSING: "m",
    StatusType.INCOMPLETE: "i",
    StatusType.OBSTRUCTED: "o",
}

SYMBOL_TABLES: Mapping[SymbolEncoding, SymbolTable] = MappingProxyType(
    {
        SymbolEncoding.DEFAULT: SymbolTable(
            statuses=MappingProxyType(dict(_DEFAULT_SYMBOLS)),
            out_of_date="*",
        ),
        SymbolEncoding.SPECIAL: SymbolTable(
            statuses=MappingProxyType({**_DEFAULT_SYMBOLS, **_SPECIAL_OVERRIDES}),
            out_of_date="d",
        ),
    }
)


def _is_reported(status_type: StatusType, config: EntryConfig) -> bool:
    if status_type is StatusType.IGNORED:
        return config.report_ignored
    if status_type is StatusType.UNVERSIONED:
        return config.report_unversioned
    return True


def render(
    status_types: Iterable[StatusValue],
    out_of_date: bool,
    config: EntryConfig,
    encoding: SymbolEncoding = SymbolEncoding.DEFAULT,
) -> str:
    """Render a status code for the observed status types.

    Args:
        status_types: Status types observed for the entry.
        out_of_date: Whether the entry is behind the remote repository.
        config: Entry configuration controlling which types are reported.
        encoding: Symbol table to render with.

    Returns:
        str: One symbol per reported status type in ``RENDER_ORDER``, followed
            by the out-of-date marker when applicable.
    """
    table = SYMBOL_TABLES[SymbolEncoding(encoding)]
    observed = set(status_types)
    symbols = [
        table.statuses[status_type]
        for status_type in RENDER_ORDER
        if status_type in observed and _is_reported(status_type, config)
    ]
    if out_of_date and config.report_out_of_date:
        symbols.append(table.out_of_date)
    return "".join(symbols)


def unrecognized_status_types(status_types: Iterable[StatusValue]) -> Tuple[str, ...]:
    """Return the observed status names that ``render`` cannot represent.

    Args:
        status_types: Status types observed for the entry.

    Returns:
        Tuple[str, ...]: Sorted names of unknown status types.
    """
    known = SILENT_STATUS_TYPES.union(RENDER_ORDER)
    return tuple(
        sorted({status_name(value) for value in status_types if value not in known})
    )


__all__ = [
    "RENDER_ORDER",
    "SILENT_STATUS_TYPES",
    "SYMBOL_TABLES",
    "SymbolEncoding",
    "SymbolTable",
    "render",
    "unrecognized_status_types",
]
