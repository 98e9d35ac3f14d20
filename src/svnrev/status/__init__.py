"""Status aggregation engine."""

from .aggregator import StatusAccumulator, aggregate, aggregate_partitions, empty_summary
from .errors import NotWorkingCopyError, StatusBackendError, StatusError
from .models import Depth, StatusRecord, StatusType, Summary
from .symbols import RENDER_ORDER, SymbolEncoding, render, unrecognized_status_types

__all__ = [
    "Depth",
    "NotWorkingCopyError",
    "RENDER_ORDER",
    "StatusAccumulator",
    "StatusBackendError",
    "StatusError",
    "StatusRecord",
    "StatusType",
    "Summary",
    "SymbolEncoding",
    "aggregate",
    "aggregate_partitions",
    "empty_summary",
    "render",
    "unrecognized_status_types",
]
