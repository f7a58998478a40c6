"""Operation limit validation for LotLedger.

Decides whether a proposed pallet, waste, or return weight may be added
to a lot. All three kinds draw from the same budget: the sum of the
records' expected weights.

Reason codes produced by this module:
    ERR_020: candidate weight is zero or negative.
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
from lotledger.errors import ErrorCode, WarningCode
from lotledger.indicators import compute_progress, remaining_weight
from lotledger.models import (
    AggregatedTotals,
    ClassificationRecord,
    LedgerConfig,
    OperationKind,
    Outcome,
    ValidationResult,
)
from lotledger.utils import (
    ZERO,
    coerce_records,
    format_kg,
    parse_kind,
    round_half_up,
    to_decimal,
)

logger = logging.getLogger(__name__)

_REJECTION_MESSAGES: dict[OperationKind, str] = {
    OperationKind.PALLET: "Cannot add more classified weight",
    OperationKind.WASTE: "Cannot add more waste",
    OperationKind.RETURN: "Cannot add more returns",
}


def validate_operation(
    candidate_weight: Decimal | int | float | str,
    kind: OperationKind | str,
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    config: LedgerConfig | None = None,
) -> ValidationResult:
    """Decide whether adding ``candidate_weight`` of ``kind`` is allowed.

    Invalid input is rejected before any budget check. Otherwise the
    candidate is added to the current classified weight and compared
    against the expected weight. No side effects: the caller persists the
    entry only after an accepted result.

    Args:
        candidate_weight: Weight the operator wants to add, in kg.
        kind: Pallet, Waste, or Return.
        records: Current record snapshot (one record or a batch).
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        ValidationResult with outcome Accepted, AcceptedWithWarning, or Rejected.

    Raises:
        LedgerInputError: ERR_010 on a non-numeric weight, unknown kind, or
            malformed record.
    """
    config = config or DEFAULT_CONFIG
    candidate = to_decimal(candidate_weight, "candidate_weight")
    operation = parse_kind(kind)
    validated = coerce_records(records)
    totals = aggregate(validated, config)

    if candidate <= ZERO:
        return reject_input(
            totals,
            ErrorCode.ERR_020,
            f"Weight must be greater than 0 (got {candidate})",
        )

    finalized = finalized_rejection(validated, totals)
    if finalized is not None:
        return finalized

    result = check_budget(
        totals, candidate, _REJECTION_MESSAGES[operation], "adding this", config
    )
    logger.debug(
        "%s of %s kg: %s", operation.value, candidate, result.outcome.value
    )
    return result


def check_budget(
    totals: AggregatedTotals,
    delta: Decimal,
    rejection_prefix: str,
    action_phrase: str,
    config: LedgerConfig,
) -> ValidationResult:
    """Apply the projected-total check shared by both validators.

    Rejects when ``classified + delta`` exceeds the expected weight. Flags
    acceptance with a warning when the projected fraction of the budget is
    above ``config.warning_threshold``.

    Args:
        totals: Aggregated totals of the current snapshot.
        delta: Weight the operation would add (may be negative for adjustments).
        rejection_prefix: Operation-specific text for the rejection message.
        action_phrase: Text naming the action in the warning message.
        config: Ledger thresholds.

    Returns:
        ValidationResult for the budget decision.
    """
    projected_total = totals.classified_weight + delta
    remaining = remaining_weight(totals)
    projected_progress = compute_progress(
        projected_total, totals.expected_weight, config
    )

    if projected_total > totals.expected_weight:
        message = (
            f"{rejection_prefix}. Maximum available weight: "
            f"{format_kg(remaining, config.message_decimals)} kg"
        )
        logger.warning("[%s] %s", ErrorCode.ERR_030.value, message)
        return ValidationResult(
            outcome=Outcome.REJECTED,
            code=ErrorCode.ERR_030,
            message=message,
            remaining_weight=remaining,
            current_progress=totals.progress,
            projected_progress=projected_progress,
        )

    if (
        totals.expected_weight > ZERO
        and projected_total / totals.expected_weight > config.warning_threshold
    ):
        message = (
            f"Warning: {action_phrase} brings progress to "
            f"{round_half_up(projected_progress, 1)}%"
        )
        logger.warning("[%s] %s", WarningCode.ATT_001.value, message)
        return ValidationResult(
            outcome=Outcome.ACCEPTED_WITH_WARNING,
            code=WarningCode.ATT_001,
            message=message,
            remaining_weight=remaining,
            current_progress=totals.progress,
            projected_progress=projected_progress,
        )

    return ValidationResult(
        outcome=Outcome.ACCEPTED,
        remaining_weight=remaining,
        current_progress=totals.progress,
        projected_progress=projected_progress,
    )


def finalized_rejection(
    records: list[ClassificationRecord], totals: AggregatedTotals
) -> ValidationResult | None:
    """Return a rejection if any record is finalized, else None."""
    locked = [r for r in records if r.is_finalized]
    if not locked:
        return None
    lots = ", ".join(r.lot or str(r.id) for r in locked)
    return reject_input(
        totals,
        ErrorCode.ERR_023,
        f"Classification is finalized and can no longer be modified: {lots}",
    )


def reject_input(
    totals: AggregatedTotals, code: ErrorCode, message: str
) -> ValidationResult:
    """Build an input rejection that leaves the budget untouched."""
    logger.warning("[%s] %s", code.value, message)
    return ValidationResult(
        outcome=Outcome.REJECTED,
        code=code,
        message=message,
        remaining_weight=remaining_weight(totals),
        current_progress=totals.progress,
        projected_progress=totals.progress,
    )
