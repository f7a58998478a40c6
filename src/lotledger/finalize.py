"""Finalization gate for LotLedger.

Decides whether a classification may move from Open to Finalized, after
which no further mutation is accepted. The transition itself is performed
by an external collaborator once the gate allows it.

Blocking codes produced by this module:
    ERR_040: no records supplied.
    ERR_041: no category has a classified pallet.
    ERR_042: a classified category has no unit price.
    ERR_043: progress is below 100%.
    ERR_044: progress is negative or above max_progress.
    ERR_045: a record is already finalized.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_DOWN, Decimal
from typing import Any

from lotledger.aggregate import aggregate, classified_categories
from lotledger.config import DEFAULT_CONFIG
from lotledger.errors import ErrorCode
from lotledger.indicators import exact_progress
from lotledger.models import (
    Category,
    ClassificationRecord,
    FinalizationChecks,
    FinalizationIssue,
    FinalizationResult,
    LedgerConfig,
)
from lotledger.utils import CATEGORY_ORDER, HUNDRED, ZERO, coerce_records, to_decimal

logger = logging.getLogger(__name__)


def evaluate_finalization(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    progress: Decimal | int | float | str | None = None,
    config: LedgerConfig | None = None,
) -> FinalizationResult:
    """Evaluate every finalization criterion and report all blockers at once.

    Finalization is allowed only when at least one category holds a
    pallet, every such category is priced above zero on every record, and
    progress has reached 100%. Categories without pallets are exempt from
    the price requirement.

    Args:
        records: Current record snapshot (one record or a batch).
        progress: Progress to judge against. When None, the unrounded
            ratio of classified to expected weight is judged and the
            result carries the rounded value.
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        FinalizationResult with can_finalize, issues, and category lists.

    Raises:
        LedgerInputError: ERR_010 on a malformed record or non-numeric progress.
    """
    config = config or DEFAULT_CONFIG
    validated = coerce_records(records)

    if not validated:
        return FinalizationResult(
            can_finalize=False,
            issues=[
                FinalizationIssue(
                    code=ErrorCode.ERR_040,
                    message="No classifications available",
                )
            ],
            classified_categories=[],
            unclassified_categories=list(CATEGORY_ORDER),
            checks=FinalizationChecks(
                has_classified_categories=False,
                prices_set=False,
                progress_complete=False,
            ),
            progress=ZERO,
        )

    if progress is None:
        totals = aggregate(validated, config)
        current = exact_progress(totals)
        shown = totals.progress
    else:
        current = shown = to_decimal(progress, "progress")

    classified = classified_categories(validated)
    unclassified = [c for c in CATEGORY_ORDER if c not in classified]
    issues: list[FinalizationIssue] = []

    # 1. At least one category classified
    if not classified:
        issues.append(
            FinalizationIssue(
                code=ErrorCode.ERR_041,
                message="No category has classified pallets",
            )
        )

    # 2. Prices for classified categories only
    price_issues = _price_issues(validated, classified)
    issues.extend(price_issues)

    # 3. Progress complete
    progress_complete = current >= HUNDRED
    if not progress_complete:
        # Truncated so a lot just short of 100% never reads as 100.00%
        short_of = current.quantize(Decimal("0.01"), rounding=ROUND_DOWN)
        issues.append(
            FinalizationIssue(
                code=ErrorCode.ERR_043,
                message=(
                    f"Progress must reach 100% to finalize "
                    f"(current: {short_of}%)"
                ),
            )
        )

    if current < ZERO or current > config.max_progress:
        issues.append(
            FinalizationIssue(
                code=ErrorCode.ERR_044,
                message=(
                    f"Progress {current:.2f}% is outside the allowed range "
                    f"(0% to {config.max_progress}%)"
                ),
            )
        )

    for record in validated:
        if record.is_finalized:
            issues.append(
                FinalizationIssue(
                    code=ErrorCode.ERR_045,
                    message=f"Classification {_label(record)} is already finalized",
                    record_id=record.id,
                )
            )

    result = FinalizationResult(
        can_finalize=not issues,
        issues=issues,
        classified_categories=classified,
        unclassified_categories=unclassified,
        checks=FinalizationChecks(
            has_classified_categories=bool(classified),
            prices_set=not price_issues,
            progress_complete=progress_complete,
        ),
        progress=shown,
    )

    if result.can_finalize:
        logger.info("Finalization allowed at %s%%", current)
    else:
        logger.info("Finalization blocked: %d issue(s)", len(issues))
        for issue in issues:
            logger.debug("[%s] %s", issue.code, issue.message)
    return result


def classification_status(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
    result: FinalizationResult,
) -> str:
    """Return a one-line status for the classification header.

    Args:
        records: The record snapshot the result was computed from.
        result: Output of evaluate_finalization() for the same records.

    Returns:
        "Classification finalized", "Ready to finalize", or
        "Pending: N validation(s) required".
    """
    if any(record.is_finalized for record in coerce_records(records)):
        return "Classification finalized"
    if result.can_finalize:
        return "Ready to finalize"
    return f"Pending: {len(result.issues)} validation(s) required"


def _price_issues(
    records: list[ClassificationRecord], classified: list[Category]
) -> list[FinalizationIssue]:
    """Collect a blocker for each classified category priced at zero.

    Lot codes are named only when the set holds more than one record.
    """
    issues: list[FinalizationIssue] = []
    for record in records:
        for category in classified:
            if record.price_for(category) > ZERO:
                continue
            message = f"{category.value} price is not set or invalid"
            if len(records) > 1:
                message += f" for lot {_label(record)}"
            issues.append(
                FinalizationIssue(
                    code=ErrorCode.ERR_042,
                    message=message,
                    category=category,
                    record_id=record.id,
                )
            )
    return issues


def _label(record: ClassificationRecord) -> str:
    return record.lot or str(record.id)
