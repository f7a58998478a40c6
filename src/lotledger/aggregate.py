"""Weight aggregation for LotLedger.

Reduces one or more classification records into category totals, waste
total, return total, classified total, and expected total. Every
validator in the package starts from these totals.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from lotledger.config import DEFAULT_CONFIG
from lotledger.indicators import compute_progress
from lotledger.models import (
    AggregatedTotals,
    Category,
    ClassificationRecord,
    LedgerConfig,
)
from lotledger.utils import CATEGORY_ORDER, ZERO, coerce_records

logger = logging.getLogger(__name__)


def aggregate(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    config: LedgerConfig | None = None,
) -> AggregatedTotals:
    """Aggregate pallet, waste, and return weights across records.

    Sums pallet weights grouped by category, waste weights, return
    weights, and expected weights. The result is a pure projection of the
    input: calling this twice on the same records yields equal totals, and
    the order of records or entries does not matter.

    Args:
        records: ClassificationRecord instances or mappings of the same shape.
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        AggregatedTotals with all four categories present and progress set.

    Raises:
        LedgerInputError: ERR_010 if a record is malformed.
    """
    config = config or DEFAULT_CONFIG
    validated = coerce_records(records)

    category_weights: dict[Category, Decimal] = {c: ZERO for c in CATEGORY_ORDER}
    waste_weight = ZERO
    return_weight = ZERO
    expected_weight = ZERO

    for record in validated:
        for pallet in record.pallets:
            category_weights[pallet.category] += pallet.weight
        waste_weight += sum((w.weight for w in record.waste), ZERO)
        return_weight += sum((r.weight for r in record.returns), ZERO)
        expected_weight += record.expected_weight

    classified_weight = (
        sum(category_weights.values(), ZERO) + waste_weight + return_weight
    )
    progress = compute_progress(classified_weight, expected_weight, config)

    logger.debug(
        "Aggregated %d record(s): classified %s of expected %s (%s%%)",
        len(validated),
        classified_weight,
        expected_weight,
        progress,
    )

    return AggregatedTotals(
        category_weights=category_weights,
        waste_weight=waste_weight,
        return_weight=return_weight,
        classified_weight=classified_weight,
        expected_weight=expected_weight,
        progress=progress,
    )


def aggregate_by_record(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    config: LedgerConfig | None = None,
) -> dict[int, AggregatedTotals]:
    """Aggregate each record on its own, keyed by record id.

    Used for per-lot indicators when an order holds several
    classifications. Records sharing an id are aggregated together.

    Args:
        records: ClassificationRecord instances or mappings.
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        Dict of record id to that record's AggregatedTotals, in first-seen order.
    """
    grouped: dict[int, list[ClassificationRecord]] = {}
    for record in coerce_records(records):
        grouped.setdefault(record.id, []).append(record)
    return {
        record_id: aggregate(group, config)
        for record_id, group in grouped.items()
    }


def classified_categories(records: Iterable[ClassificationRecord]) -> list[Category]:
    """Return categories holding at least one pallet, in canonical order."""
    present = {pallet.category for record in records for pallet in record.pallets}
    return [c for c in CATEGORY_ORDER if c in present]
