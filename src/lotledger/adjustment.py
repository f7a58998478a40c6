"""Manual weight adjustment validation for LotLedger.

Validates a correction that changes several category weights in one
action, used to fix misclassified totals without re-entering pallets.

Reason codes produced by this module:
    ERR_021: every supplied delta is zero.
    ERR_022: a negative delta would take a category below zero.
    ERR_023: a record in the set is already finalized.
    ERR_030: projected total exceeds the expected weight.
    ATT_001: accepted, but projected progress is above the warning threshold.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from lotledger.aggregate import aggregate
from lotledger.config import DEFAULT_CONFIG
from lotledger.errors import ErrorCode, LedgerInputError
from lotledger.limits import check_budget, finalized_rejection, reject_input
from lotledger.models import (
    AggregatedTotals,
    Category,
    ClassificationRecord,
    LedgerConfig,
    ValidationResult,
)
from lotledger.utils import (
    CATEGORY_ORDER,
    ZERO,
    coerce_records,
    format_kg,
    parse_category,
    to_decimal,
)

logger = logging.getLogger(__name__)


def validate_adjustment(
    deltas: Mapping[Category | str, Decimal | int | float | str | None],
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    config: LedgerConfig | None = None,
    target_id: int | None = None,
) -> ValidationResult:
    """Decide whether a multi-category weight correction is allowed.

    Categories missing from ``deltas`` (or mapped to None) are treated as
    zero. The sum of all deltas goes through the same projected-total
    check as a single operation. On acceptance, ``accepted_deltas`` holds
    only the non-zero deltas, which is what the caller forwards to
    persistence.

    Args:
        deltas: Partial map of category (``Category`` or name such as
            ``"xl"``) to weight delta in kg.
        records: Current record snapshot (one record or a batch).
        config: Ledger thresholds; DEFAULT_CONFIG when None.
        target_id: Id of the record the deltas will be applied to. When
            given, categories may not go negative on that record alone;
            otherwise the totals of the whole set are used.

    Returns:
        ValidationResult with outcome Accepted, AcceptedWithWarning, or Rejected.

    Raises:
        LedgerInputError: ERR_011 on an unknown or repeated category key,
            ERR_010 on a non-numeric delta, a malformed record, or a
            ``target_id`` missing from the set.
    """
    config = config or DEFAULT_CONFIG
    parsed = _parse_deltas(deltas)
    validated = coerce_records(records)
    totals = aggregate(validated, config)

    non_zero = {c: parsed[c] for c in CATEGORY_ORDER if parsed.get(c, ZERO) != ZERO}
    if not non_zero:
        return reject_input(
            totals,
            ErrorCode.ERR_021,
            "At least one weight must be specified to adjust",
        )

    held = totals if target_id is None else _target_totals(validated, target_id, config)
    for category, delta in non_zero.items():
        current = held.category_weights[category]
        if current + delta < ZERO:
            return reject_input(
                totals,
                ErrorCode.ERR_022,
                (
                    f"{category.value} weight cannot become negative "
                    f"(current {format_kg(current, config.message_decimals)} kg, "
                    f"adjustment {format_kg(delta, config.message_decimals)} kg)"
                ),
            )

    finalized = finalized_rejection(validated, totals)
    if finalized is not None:
        return finalized

    combined_delta = sum(non_zero.values(), ZERO)
    result = check_budget(
        totals, combined_delta, "Cannot adjust weights", "this adjustment", config
    )
    if not result.accepted:
        return result

    logger.info(
        "Adjustment accepted: %s",
        ", ".join(f"{c.value} {d:+}" for c, d in non_zero.items()),
    )
    return result.model_copy(update={"accepted_deltas": non_zero})


def _parse_deltas(
    deltas: Mapping[Category | str, Decimal | int | float | str | None],
) -> dict[Category, Decimal]:
    """Normalize category keys and delta values.

    Args:
        deltas: Raw category to delta mapping from the caller.

    Returns:
        Dict of Category to Decimal delta, None values dropped.

    Raises:
        LedgerInputError: ERR_010 if ``deltas`` is not a mapping or a value
            is not numeric, ERR_011 on an unknown or repeated category.
    """
    if not isinstance(deltas, Mapping):
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=(
                "Adjustment must be a mapping of category to delta, "
                f"got {type(deltas).__name__}"
            ),
            field="deltas",
        )

    parsed: dict[Category, Decimal] = {}
    seen: set[Category] = set()
    for key, value in deltas.items():
        category = parse_category(key)
        if category in seen:
            raise LedgerInputError(
                code=ErrorCode.ERR_011,
                message=f"Category {category.value} given more than once",
                field="category",
            )
        seen.add(category)
        if value is None:
            continue
        parsed[category] = to_decimal(value, category.value)
    return parsed


def _target_totals(
    records: list[ClassificationRecord], target_id: int, config: LedgerConfig
) -> AggregatedTotals:
    """Aggregate the records carrying ``target_id``.

    Raises:
        LedgerInputError: ERR_010 if no record has that id.
    """
    target = [record for record in records if record.id == target_id]
    if not target:
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=f"Classification {target_id} is not part of the record set",
            field="target_id",
            record_id=target_id,
        )
    return aggregate(target, config)
