"""Tests for folding status records into entry summaries."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

from svnrev.config.models import EntryConfig
from svnrev.status import (
    StatusAccumulator,
    StatusRecord,
    StatusType,
    aggregate,
    aggregate_partitions,
    empty_summary,
)

BASE_DATE = datetime(2012, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def _record(**fields: object) -> StatusRecord:
    fields.setdefault("local_status", "normal")
    return StatusRecord(**fields)


def _sample_stream() -> list[StatusRecord]:
    return [
        _record(
            path=".",
            revision=0,
            repository_root="https://svn.example.com/repo",
            repository_relative_path="trunk",
        ),
        _record(
            path="a.txt",
            local_status="modified",
            revision=5,
            changed_revision=4,
            changed_date=BASE_DATE,
        ),
        _record(
            path="b.txt",
            properties_status="modified",
            revision=7,
            changed_revision=6,
            changed_date=BASE_DATE + timedelta(days=1),
        ),
        _record(
            path="c.txt",
            revision=7,
            changed_revision=6,
            changed_date=BASE_DATE + timedelta(days=2),
        ),
        _record(path="d.txt", local_status="unversioned"),
        _record(path="e.txt", local_status="added", revision=0),
        _record(path="f.txt", revision=3, changed_revision=2, repository_changed_revision=9),
    ]


def test_modified_file_and_property_change_report_mixed_revisions() -> None:
    config = EntryConfig(report_ignored=False, report_unversioned=True, report_out_of_date=False)
    records = [
        _record(local_status="modified", revision=5),
        _record(local_status="normal", properties_status="modified", revision=7),
    ]

    summary = aggregate(config, records)

    assert summary.max_revision == 7
    assert summary.min_revision == 5
    assert summary.mixed_revisions is True
    assert summary.status_code == "M"
    assert summary.special_status_code == "M"
    assert summary.record_count == 2


def test_empty_stream_collapses_to_unversioned_summary() -> None:
    config = EntryConfig(report_unversioned=True)

    summary = aggregate(config, [])

    assert summary == empty_summary(config)
    assert summary.status_types == frozenset({StatusType.UNVERSIONED})
    assert summary.status_code == "?"
    assert summary.special_status_code == "u"
    assert summary.max_revision == -1
    assert summary.max_committed_revision == -1
    assert summary.committed_date is None
    assert summary.repository_root == ""
    assert summary.repository_path == ""
    assert summary.mixed_revisions is False


def test_empty_stream_hides_unversioned_marker_when_not_reported() -> None:
    summary = aggregate(EntryConfig(report_unversioned=False), [])

    assert summary.status_code == ""
    assert summary.special_status_code == ""


def test_stale_record_marks_entry_out_of_date() -> None:
    config = EntryConfig(report_out_of_date=True)
    records = [_record(repository_changed_revision=10, changed_revision=8)]

    summary = aggregate(config, records)

    assert summary.out_of_date is True
    assert summary.status_code == "*"
    assert summary.special_status_code == "d"


def test_out_of_date_is_never_cleared_by_later_records() -> None:
    config = EntryConfig(report_out_of_date=True)
    records = [
        _record(revision=3, changed_revision=2, repository_changed_revision=4),
        _record(revision=4, changed_revision=4, repository_changed_revision=4),
        _record(revision=4, changed_revision=4),
    ]

    assert aggregate(config, records).out_of_date is True


def test_out_of_date_marker_requires_reporting_flag() -> None:
    records = [_record(repository_changed_revision=10, changed_revision=8)]

    summary = aggregate(EntryConfig(report_out_of_date=False), records)

    assert summary.out_of_date is True
    assert summary.status_code == ""


def test_remote_only_item_without_commit_is_out_of_date() -> None:
    records = [_record(local_status="none", repository_changed_revision=4)]

    assert aggregate(EntryConfig(), records).out_of_date is True


def test_revision_zero_never_counts_towards_mixed_revisions() -> None:
    config = EntryConfig()

    only_zero = aggregate(config, [_record(revision=0), _record(local_status="added", revision=0)])
    zero_and_five = aggregate(config, [_record(revision=0), _record(revision=5)])

    assert only_zero.max_revision == 0
    assert only_zero.min_revision == -1
    assert only_zero.mixed_revisions is False
    assert zero_and_five.max_revision == 5
    assert zero_and_five.min_revision == 5
    assert zero_and_five.mixed_revisions is False


def test_single_positive_revision_is_not_mixed() -> None:
    summary = aggregate(EntryConfig(), [_record(revision=4), _record(revision=4)])

    assert summary.mixed_revisions is False


def test_negative_and_missing_revisions_are_ignored() -> None:
    summary = aggregate(
        EntryConfig(), [_record(revision=-1, changed_revision=-1), _record(local_status="missing")]
    )

    assert summary.max_revision == -1
    assert summary.max_committed_revision == -1


def test_committed_date_comes_from_the_winning_record() -> None:
    first = BASE_DATE
    second = BASE_DATE + timedelta(hours=1)
    tied = BASE_DATE + timedelta(hours=2)
    records = [
        _record(changed_revision=3, changed_date=first),
        _record(changed_revision=5, changed_date=second),
        _record(changed_revision=5, changed_date=tied),
        _record(changed_revision=4, changed_date=tied),
    ]

    summary = aggregate(EntryConfig(), records)

    assert summary.max_committed_revision == 5
    assert summary.committed_date == second


def test_repository_identity_is_captured_from_first_record_only() -> None:
    records = [
        _record(repository_root="https://one", repository_relative_path="trunk"),
        _record(repository_root="https://two", repository_relative_path="branches/x"),
    ]
    silent_first = [
        _record(),
        _record(repository_root="https://two", repository_relative_path="branches/x"),
    ]

    summary = aggregate(EntryConfig(), records)

    assert (summary.repository_root, summary.repository_path) == ("https://one", "trunk")
    assert not aggregate(EntryConfig(), silent_first).has_repository


def test_properties_status_only_counts_for_normal_nodes() -> None:
    records = [_record(local_status="added", properties_status="modified")]

    summary = aggregate(EntryConfig(), records)

    assert summary.status_code == "A"
    assert StatusType.MODIFIED not in summary.status_types


def test_status_names_are_coerced_to_status_types() -> None:
    record = _record(local_status="modified", properties_status="conflicted")

    assert record.local_status is StatusType.MODIFIED
    assert record.properties_status is StatusType.CONFLICTED


def test_unknown_statuses_are_reported_but_not_rendered() -> None:
    records = [_record(local_status="merged"), _record(local_status="modified")]

    summary = aggregate(EntryConfig(), records)

    assert summary.unrecognized_statuses == ("merged",)
    assert summary.status_code == "M"


def test_partitioned_fold_matches_sequential_fold() -> None:
    config = EntryConfig(report_out_of_date=True)
    records = _sample_stream()
    records.append(
        _record(path="g.txt", revision=7, changed_revision=6, changed_date=BASE_DATE - timedelta(1))
    )
    expected = aggregate(config, records)

    for cut in range(len(records) + 1):
        assert aggregate_partitions(config, [records[:cut], records[cut:]]) == expected
    for first, second in itertools.combinations(range(len(records) + 1), 2):
        parts = [records[:first], records[first:second], records[second:]]
        assert aggregate_partitions(config, parts) == expected


def test_merge_with_empty_accumulator_is_identity() -> None:
    config = EntryConfig()
    records = _sample_stream()
    folded = StatusAccumulator().extend(records)

    left = StatusAccumulator().merge(StatusAccumulator().extend(records))
    right = StatusAccumulator().extend(records).merge(StatusAccumulator())

    assert left.summarize(config) == folded.summarize(config)
    assert right.summarize(config) == folded.summarize(config)


def test_rendered_codes_do_not_depend_on_record_order() -> None:
    config = EntryConfig(report_ignored=True, report_out_of_date=True)
    records = [
        _record(local_status="unversioned"),
        _record(local_status="ignored"),
        _record(local_status="deleted", revision=2),
        _record(local_status="added", revision=0, repository_changed_revision=3),
    ]
    expected = aggregate(config, records)

    for permutation in itertools.permutations(records):
        summary = aggregate(config, permutation)
        assert summary.status_code == expected.status_code == "ADI?*"
        assert summary.special_status_code == expected.special_status_code == "ADIud"
        assert summary.status_types == expected.status_types


def test_sample_stream_summary() -> None:
    summary = aggregate(EntryConfig(report_out_of_date=True), _sample_stream())

    assert summary.repository_root == "https://svn.example.com/repo"
    assert summary.repository_path == "trunk"
    assert summary.max_revision == 7
    assert summary.min_revision == 3
    assert summary.mixed_revisions is True
    assert summary.max_committed_revision == 6
    assert summary.committed_date == BASE_DATE + timedelta(days=1)
    assert summary.status_code == "AM?*"
    assert summary.special_status_code == "AMud"
