"""Fold a stream of status records into a per-entry summary.

The fold is a commutative monoid: partial accumulators built over disjoint
parts of a status walk can be merged with ``StatusAccumulator.merge`` and
yield the same summary as folding the whole stream sequentially. The only
order-sensitive piece is the committed-date tie break, where the earlier
record wins, and ``merge`` keeps the left operand on ties to match.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional, Set, Tuple

from .models import StatusRecord, StatusType, StatusValue, Summary
from .symbols import SymbolEncoding, render, unrecognized_status_types

if TYPE_CHECKING:
    from svnrev.config.models import EntryConfig

CommittedPair = Tuple[int, Optional[datetime]]


def _max(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None:
        return right
    if right is None:
        return left
    return max(left, right)


def _min(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None:
        return right
    if right is None:
        return left
    return min(left, right)


class StatusAccumulator:
    """Mutable partial fold over status records."""

    def __init__(self) -> None:
        self.repository_root: Optional[str] = None
        self.repository_path: Optional[str] = None
        self.max_revision: Optional[int] = None
        self.min_revision: Optional[int] = None
        self.committed: Optional[CommittedPair] = None
        self.status_types: Set[StatusValue] = set()
        self.out_of_date = False
        self.record_count = 0

    def add(self, record: StatusRecord) -> None:
        """Fold one status record into the accumulator."""
        if self.record_count == 0:
            self.repository_root = record.repository_root
            self.repository_path = record.repository_relative_path
        self.record_count += 1

        revision = record.revision
        if revision is not None and revision >= 0:
            self.max_revision = _max(self.max_revision, revision)
            if revision > 0:
                self.min_revision = _min(self.min_revision, revision)

        changed = record.changed_revision
        if changed is not None and changed >= 0:
            if self.committed is None or changed > self.committed[0]:
                self.committed = (changed, record.changed_date)

        self.status_types.add(record.local_status)
        if record.local_status == StatusType.NORMAL:
            self.status_types.add(record.properties_status)

        remote = record.repository_changed_revision
        if remote is not None and remote > (changed if changed is not None else -1):
            self.out_of_date = True

    def extend(self, records: Iterable[StatusRecord]) -> "StatusAccumulator":
        """Fold every record of ``records`` and return ``self``."""
        for record in records:
            self.add(record)
        return self

    def merge(self, other: "StatusAccumulator") -> "StatusAccumulator":
        """Combine ``other`` into this accumulator and return ``self``.

        ``self`` is treated as the part of the stream that came first.
        """
        if self.record_count == 0:
            self.repository_root = other.repository_root
            self.repository_path = other.repository_path
        self.record_count += other.record_count
        self.max_revision = _max(self.max_revision, other.max_revision)
        self.min_revision = _min(self.min_revision, other.min_revision)
        if other.committed is not None:
            if self.committed is None or other.committed[0] > self.committed[0]:
                self.committed = other.committed
        self.status_types |= other.status_types
        self.out_of_date = self.out_of_date or other.out_of_date
        return self

    def summarize(self, config: EntryConfig) -> Summary:
        """Produce the immutable summary for the folded records."""
        if self.record_count == 0:
            return empty_summary(config)

        max_revision = self.max_revision if self.max_revision is not None else -1
        min_revision = self.min_revision if self.min_revision is not None else -1
        committed_revision, committed_date = self.committed or (-1, None)
        status_types = frozenset(self.status_types)
        return Summary(
            repository_root=self.repository_root or "",
            repository_path=self.repository_path or "",
            max_revision=max_revision,
            min_revision=min_revision,
            mixed_revisions=max_revision > 0 and min_revision > 0 and max_revision != min_revision,
            max_committed_revision=committed_revision,
            committed_date=committed_date,
            out_of_date=self.out_of_date,
            status_types=status_types,
            status_code=render(status_types, self.out_of_date, config, SymbolEncoding.DEFAULT),
            special_status_code=render(
                status_types, self.out_of_date, config, SymbolEncoding.SPECIAL
            ),
            unrecognized_statuses=unrecognized_status_types(status_types),
            record_count=self.record_count,
        )


def empty_summary(config: EntryConfig) -> Summary:
    """Return the summary of an entry that is not under version control."""
    status_types = frozenset({StatusType.UNVERSIONED})
    return Summary(
        status_types=status_types,
        status_code=render(status_types, False, config, SymbolEncoding.DEFAULT),
        special_status_code=render(status_types, False, config, SymbolEncoding.SPECIAL),
    )


def aggregate(config: EntryConfig, records: Iterable[StatusRecord]) -> Summary:
    """Fold a complete status stream into a summary.

    Args:
        config: Entry configuration controlling status-code rendering.
        records: Status records of the entry, consumed to completion.

    Returns:
        Summary: Aggregated state of the entry.
    """
    return StatusAccumulator().extend(records).summarize(config)


def aggregate_partitions(
    config: EntryConfig, partitions: Iterable[Iterable[StatusRecord]]
) -> Summary:
    """Fold each partition separately and merge the partial results in order.

    Args:
        config: Entry configuration controlling status-code rendering.
        partitions: Consecutive parts of one entry's status stream.

    Returns:
        Summary: The same summary ``aggregate`` returns for the concatenated stream.
    """
    total = StatusAccumulator()
    for partition in partitions:
        total.merge(StatusAccumulator().extend(partition))
    return total.summarize(config)


__all__ = ["StatusAccumulator", "aggregate", "aggregate_partitions", "empty_summary"]
