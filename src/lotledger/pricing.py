"""Pricing of classified weight for LotLedger.

Values each category as weight x unit price (prices are per kg) and
summarizes a record's price list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from lotledger.models import (
    Category,
    ClassificationRecord,
    PriceStatistics,
    Valuation,
)
from lotledger.utils import CATEGORY_ORDER, ZERO, coerce_records


def value_by_category(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
) -> Valuation:
    """Value the classified pallets of each record at that record's prices.

    Waste and returns carry no value. Categories without pallets are
    valued at zero regardless of their price.

    Args:
        records: ClassificationRecord instances or mappings.

    Returns:
        Valuation with per-category values and their total.
    """
    values: dict[Category, Decimal] = {c: ZERO for c in CATEGORY_ORDER}
    for record in coerce_records(records):
        for pallet in record.pallets:
            values[pallet.category] += pallet.weight * record.price_for(pallet.category)
    return Valuation(
        category_values=values,
        total_value=sum(values.values(), ZERO),
    )


def price_statistics(record: ClassificationRecord) -> PriceStatistics:
    """Summarize the XL, L, M, S and returns prices of one record.

    Args:
        record: The classification whose price list to summarize.

    Returns:
        PriceStatistics with mean, extremes, spread, total, and population
        standard deviation.
    """
    prices = [record.price_for(c) for c in CATEGORY_ORDER] + [record.return_price]
    total = sum(prices, ZERO)
    mean = total / len(prices)
    variance = sum(((p - mean) ** 2 for p in prices), ZERO) / len(prices)
    return PriceStatistics(
        mean=mean,
        maximum=max(prices),
        minimum=min(prices),
        spread=max(prices) - min(prices),
        total=total,
        std_dev=variance.sqrt(),
    )
