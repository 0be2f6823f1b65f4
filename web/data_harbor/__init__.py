"""
data_harbor: bounded, period-segmented staging buffer for client telemetry.

Public API (stable):
- Harbor                   (façade: add / divide / get_all / clear / stock)
- HarborConfig             (configuration)
- Entry, make_entry, make_divider
- CapacityLedger, DedupIndex, SegmentStore, SnapshotAssembler (building blocks)
- HarborError, MalformedEntryError

The host wires producers and exporters against `Harbor`; the other names are
exported for callers that compose their own engine.
"""

from __future__ import annotations

# Configuration
from .config import DEFAULT_MAXIMUM, HarborConfig

# Façade
from .harbor import Harbor

# Building blocks
from .assembler import SnapshotAssembler, SnapshotPlan
from .codec import decode_entry, encode_entry
from .divider import PeriodTimer, is_valid_period, should_divide
from .ledger import CapacityLedger
from .segments import Segment, SegmentStore
from .stock import DedupIndex

# DTOs
from .dto import (
    DATA_TYPES,
    DIVIDER_KIND,
    DataType,
    Entry,
    StoredEntry,
    make_divider,
    make_entry,
)

# Errors
from .errors import HarborError, MalformedEntryError

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_MAXIMUM",
    "HarborConfig",
    "Harbor",
    "SnapshotAssembler",
    "SnapshotPlan",
    "decode_entry",
    "encode_entry",
    "PeriodTimer",
    "is_valid_period",
    "should_divide",
    "CapacityLedger",
    "Segment",
    "SegmentStore",
    "DedupIndex",
    "DATA_TYPES",
    "DIVIDER_KIND",
    "DataType",
    "Entry",
    "StoredEntry",
    "make_divider",
    "make_entry",
    "HarborError",
    "MalformedEntryError",
]
