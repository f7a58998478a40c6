"""Shared utility functions and constants for LotLedger.

Pure functions and constants imported by 2+ consumer modules.
No file I/O, no logging, no global state mutation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from lotledger.errors import ErrorCode, LedgerInputError
from lotledger.models import Category, ClassificationRecord, OperationKind

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CATEGORY_ORDER: tuple[Category, ...] = tuple(Category)
"""Categories in canonical display order (XL, L, M, S)."""

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


def round_half_up(value: Decimal, decimals: int) -> Decimal:
    """Round a Decimal using ROUND_HALF_UP semantics.

    Never uses Python's built-in round() which applies banker's rounding.

    Args:
        value: The Decimal value to round.
        decimals: Number of decimal places (>= 0).

    Returns:
        Decimal quantized to the specified number of decimal places.
    """
    quantizer = Decimal(10) ** -decimals
    return value.quantize(quantizer, rounding=ROUND_HALF_UP)


def format_kg(value: Decimal, decimals: int = 2) -> str:
    """Format a weight for operator messages, e.g. ``"12.50"``."""
    return f"{round_half_up(value, decimals):.{decimals}f}"


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part / whole * 100``, or 0 when ``whole`` is not positive."""
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a numeric input (Decimal, int, float, or str) to Decimal.

    Args:
        value: The value supplied by the caller.
        field_name: Name of the input being converted (for error context).

    Returns:
        Decimal representation of the value.

    Raises:
        LedgerInputError: ERR_010 for bools, non-numeric types, non-finite
            values, or unparsable strings.
    """
    result: Decimal | None = None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int) and not isinstance(value, bool):
        # Reason: bool is a subclass of int in Python; we must reject it explicitly.
        result = Decimal(value)
    elif isinstance(value, float):
        # Reason: Decimal(str(float)) avoids artifacts like 2.2800000...02.
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            result = None

    if result is None or not result.is_finite():
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=f"Invalid numeric value '{value}' for '{field_name}'",
            field=field_name,
        )
    return result


def parse_kind(kind: Any) -> OperationKind:
    """Resolve an operation kind such as ``"pallet"`` or ``OperationKind.WASTE``.

    Raises:
        LedgerInputError: ERR_010 when the value names no operation kind.
    """
    if isinstance(kind, OperationKind):
        return kind
    if isinstance(kind, str):
        for member in OperationKind:
            if kind.strip().lower() in (member.value.lower(), member.name.lower()):
                return member
    raise LedgerInputError(
        code=ErrorCode.ERR_010,
        message=f"Unknown operation kind '{kind}' (expected Pallet, Waste, or Return)",
        field="kind",
    )


def parse_category(key: Any) -> Category:
    """Resolve a category key such as ``"xl"``, ``"XL"`` or ``Category.XL``.

    Args:
        key: Category member or case-insensitive category name.

    Returns:
        The matching Category.

    Raises:
        LedgerInputError: ERR_011 when the key names no category.
    """
    if isinstance(key, Category):
        return key
    if isinstance(key, str):
        try:
            return Category(key.strip().upper())
        except ValueError:
            pass
    raise LedgerInputError(
        code=ErrorCode.ERR_011,
        message=f"Unknown category '{key}' (expected one of XL, L, M, S)",
        field="category",
    )


def coerce_records(
    records: Iterable[ClassificationRecord | Mapping[str, Any]],
) -> list[ClassificationRecord]:
    """Validate a record collection into ClassificationRecord models.

    Accepts model instances unchanged and validates plain mappings, as
    returned by a record-fetch collaborator.

    Args:
        records: ClassificationRecord instances or mappings.

    Returns:
        List of ClassificationRecord in input order.

    Raises:
        LedgerInputError: ERR_010 when an element is neither a record nor a
            mapping, or a mapping fails model validation.
    """
    if records is None or isinstance(records, (str, bytes, Mapping)):
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=(
                "Expected a collection of classification records, "
                f"got {type(records).__name__}"
            ),
        )

    result: list[ClassificationRecord] = []
    for index, record in enumerate(records):
        if isinstance(record, ClassificationRecord):
            result.append(record)
            continue
        if not isinstance(record, Mapping):
            raise LedgerInputError(
                code=ErrorCode.ERR_010,
                message=(
                    f"Record {index + 1} is a {type(record).__name__}, "
                    f"expected a classification record"
                ),
            )
        try:
            result.append(ClassificationRecord.model_validate(dict(record)))
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise LedgerInputError(
                code=ErrorCode.ERR_010,
                message=f"Record {index + 1} is malformed: {field}: {first['msg']}",
                field=field,
                record_id=record.get("id") if isinstance(record.get("id"), int) else None,
            ) from exc
    return result
