"""LotLedger: classification weight ledger and validation engine.

Aggregates pallet, waste, and return weights for produce lots, gates every
weight-changing operation against the lot's expected weight, and decides
when a classification may be finalized.
"""

from __future__ import annotations

__version__ = "0.1.0"

from lotledger.adjustment import validate_adjustment
from lotledger.aggregate import aggregate, aggregate_by_record
from lotledger.finalize import classification_status, evaluate_finalization
from lotledger.indicators import progress, remaining_weight
from lotledger.limits import validate_operation

__all__ = [
    "__version__",
    "aggregate",
    "aggregate_by_record",
    "classification_status",
    "evaluate_finalization",
    "progress",
    "remaining_weight",
    "validate_adjustment",
    "validate_operation",
]
