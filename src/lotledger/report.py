"""Ledger summary reporting for LotLedger.

Logs the weight totals, progress, valuation, and finalization status of a
record snapshot, followed by any validation decisions requested on the
command line.
"""

from __future__ import annotations

import logging

from lotledger.models import (
    AggregatedTotals,
    FinalizationResult,
    Outcome,
    PriceStatistics,
    ValidationResult,
    Valuation,
)
from lotledger.utils import CATEGORY_ORDER, format_kg

logger = logging.getLogger(__name__)

_SEP_MAJOR = "==========================================================================="
_SEP_MINOR = "---------------------------------------------------------------------------"


def print_ledger_summary(
    totals: AggregatedTotals,
    valuation: Valuation,
    finalization: FinalizationResult,
    status: str,
) -> None:
    """Log the summary block for a record snapshot.

    Display order:
        1. Weight per category, waste, returns, classified and expected.
        2. Progress and status line.
        3. Value per category and total.
        4. Finalization blockers, only when finalization is blocked.

    Args:
        totals: Output of aggregate().
        valuation: Output of value_by_category().
        finalization: Output of evaluate_finalization().
        status: Output of classification_status().
    """
    logger.info(_SEP_MAJOR)
    logger.info("                   CLASSIFICATION LEDGER SUMMARY")
    logger.info(_SEP_MAJOR)
    for category in CATEGORY_ORDER:
        logger.info(
            "%-20s%12s kg",
            f"{category.value}:",
            format_kg(totals.category_weights[category]),
        )
    logger.info("%-20s%12s kg", "Waste:", format_kg(totals.waste_weight))
    logger.info("%-20s%12s kg", "Returns:", format_kg(totals.return_weight))
    logger.info("%-20s%12s kg", "Classified:", format_kg(totals.classified_weight))
    logger.info("%-20s%12s kg", "Expected:", format_kg(totals.expected_weight))
    logger.info("%-20s%12s %%", "Progress:", format_kg(totals.progress))
    logger.info("%-20s%s", "Status:", status)
    logger.info(_SEP_MINOR)
    for category in CATEGORY_ORDER:
        logger.info(
            "%-20s%12s",
            f"{category.value} value:",
            format_kg(valuation.category_values[category]),
        )
    logger.info("%-20s%12s", "Total value:", format_kg(valuation.total_value))
    logger.info(_SEP_MAJOR)

    if not finalization.can_finalize:
        logger.warning("FINALIZATION BLOCKED:")
        for issue in finalization.issues:
            logger.warning("  %s: %s", issue.code, issue.message)


def print_validation(label: str, result: ValidationResult) -> None:
    """Log one validator decision with the level matching its outcome.

    Args:
        label: Short description of the checked operation.
        result: Decision returned by validate_operation() or validate_adjustment().
    """
    logger.info(_SEP_MINOR)
    if result.outcome == Outcome.REJECTED:
        logger.error("%s: REJECTED [%s] %s", label, result.code, result.message)
    elif result.outcome == Outcome.ACCEPTED_WITH_WARNING:
        logger.warning("%s: ACCEPTED [%s] %s", label, result.code, result.message)
    else:
        logger.info("%s: ACCEPTED", label)
    logger.info(
        "Remaining: %s kg, progress %s%% -> %s%%",
        format_kg(result.remaining_weight),
        format_kg(result.current_progress),
        format_kg(result.projected_progress),
    )


def print_price_statistics(label: str, stats: PriceStatistics) -> None:
    """Log the price list summary of one classification.

    Args:
        label: Lot code, or the record id when the lot has none.
        stats: Output of price_statistics() for that record.
    """
    logger.info(
        "Prices %s: mean %s, min %s, max %s, spread %s, std dev %s",
        label,
        format_kg(stats.mean),
        format_kg(stats.minimum),
        format_kg(stats.maximum),
        format_kg(stats.spread),
        format_kg(stats.std_dev),
    )
