"""Progress indicators for LotLedger.

Derives completion percentage and remaining budget from aggregated
totals. Progress is not clamped to [0, 100]: values above 100 expose
over-classification to callers.
"""

from __future__ import annotations

from decimal import Decimal

from lotledger.config import DEFAULT_CONFIG
from lotledger.models import AggregatedTotals, LedgerConfig
from lotledger.utils import ZERO, percent_of, round_half_up


def compute_progress(
    classified_weight: Decimal,
    expected_weight: Decimal,
    config: LedgerConfig | None = None,
) -> Decimal:
    """Return ``classified / expected * 100`` rounded to progress_decimals.

    An expected weight of zero yields 0 rather than a division error.

    Args:
        classified_weight: Categories + waste + returns.
        expected_weight: Budget for the record set.
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        Progress percentage as Decimal.
    """
    config = config or DEFAULT_CONFIG
    raw = percent_of(classified_weight, expected_weight)
    return round_half_up(raw, config.progress_decimals)


def progress(totals: AggregatedTotals, config: LedgerConfig | None = None) -> Decimal:
    """Return the completion percentage for aggregated totals.

    Args:
        totals: Output of aggregate().
        config: Ledger thresholds; DEFAULT_CONFIG when None.

    Returns:
        Progress percentage, 0 when the expected weight is 0.
    """
    return compute_progress(totals.classified_weight, totals.expected_weight, config)


def remaining_weight(totals: AggregatedTotals) -> Decimal:
    """Return the budget still available, floored at zero."""
    return max(totals.expected_weight - totals.classified_weight, ZERO)


def exact_progress(totals: AggregatedTotals) -> Decimal:
    """Return the unrounded completion percentage, 0 when expected is 0.

    Threshold decisions use this value; ``progress`` is for display.
    """
    return percent_of(totals.classified_weight, totals.expected_weight)
