"""Command-line interface for LotLedger.

Loads an operator snapshot of classification records, logs the ledger
summary, and optionally checks a proposed weight addition or adjustment
against it.

Exit codes: 0 when every requested check is accepted, 1 when a requested
check is rejected, 2 on config or input errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from lotledger import __version__
from lotledger.adjustment import validate_adjustment
from lotledger.aggregate import aggregate
from lotledger.config import CONFIG_FILENAME, DEFAULT_CONFIG, load_config
from lotledger.errors import ConfigError, ErrorCode, LedgerInputError
from lotledger.finalize import classification_status, evaluate_finalization
from lotledger.limits import validate_operation
from lotledger.logger import setup_diagnostic_logging, setup_logging
from lotledger.models import (
    Category,
    ClassificationRecord,
    LedgerConfig,
    OperationKind,
)
from lotledger.pricing import price_statistics, value_by_category
from lotledger.report import (
    print_ledger_summary,
    print_price_statistics,
    print_validation,
)
from lotledger.utils import coerce_records, parse_category

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for LotLedger.

    Args:
        argv: Argument list to parse. None uses sys.argv[1:].

    Returns:
        Namespace with snapshot, config, check_weight, kind, adjust,
        diagnostic, and log attributes.
    """
    parser = argparse.ArgumentParser(
        prog="lotledger",
        description="LotLedger: classification weight ledger and validation checks",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="YAML file holding the classification records of one order",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help=f"Path to {CONFIG_FILENAME} (default: ./{CONFIG_FILENAME} if present)",
    )
    parser.add_argument(
        "--check-weight",
        type=str,
        default=None,
        metavar="KG",
        help="Check whether this weight may be added to the order",
    )
    parser.add_argument(
        "--kind",
        choices=[k.value.lower() for k in OperationKind],
        default=OperationKind.PALLET.value.lower(),
        help="Kind of addition checked by --check-weight (default: pallet)",
    )
    parser.add_argument(
        "--adjust",
        type=_parse_adjustment,
        action="append",
        default=[],
        metavar="CAT=DELTA",
        help="Category weight correction to check, e.g. xl=12.5 (repeatable)",
    )
    parser.add_argument(
        "--diagnostic",
        action="store_true",
        help="Echo DEBUG-level detail to the console",
    )
    parser.add_argument(
        "--log",
        type=Path,
        default=Path("ledger_log.txt"),
        metavar="PATH",
        help="Log file path (default: ./ledger_log.txt)",
    )
    return parser.parse_args(argv)


def load_snapshot(path: Path) -> list[ClassificationRecord]:
    """Load classification records from a YAML snapshot.

    The document is either a list of records or a mapping with a
    ``classifications`` list.

    Args:
        path: Path to the snapshot file.

    Returns:
        Validated records in file order.

    Raises:
        LedgerInputError: ERR_010 if the file is missing, unparsable, or
            does not hold a list of well-formed records.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except OSError as exc:
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=f"Cannot read snapshot {path}: {exc}",
        ) from exc
    except yaml.YAMLError as exc:
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=f"Cannot parse snapshot {path.name}: {exc}",
        ) from exc

    if isinstance(data, dict):
        data = data.get("classifications")
    if not isinstance(data, list):
        raise LedgerInputError(
            code=ErrorCode.ERR_010,
            message=f"Snapshot {path.name} must hold a list of classifications",
        )
    return coerce_records(data)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for LotLedger.

    Parses arguments, sets up logging, loads config and the snapshot,
    logs the ledger summary and any requested checks, and exits with
    the appropriate code (0/1/2).

    Args:
        argv: Argument list to parse. None uses sys.argv[1:].
    """
    args = parse_args(argv)

    if args.diagnostic:
        setup_diagnostic_logging(args.log)
    else:
        setup_logging(args.log)

    try:
        config = _resolve_config(args.config)
        records = load_snapshot(args.snapshot)
    except (ConfigError, LedgerInputError) as e:
        logger.error("[%s] %s", e.code, e.message)
        sys.exit(2)

    totals = aggregate(records, config)
    finalization = evaluate_finalization(records, config=config)
    print_ledger_summary(
        totals,
        value_by_category(records),
        finalization,
        classification_status(records, finalization),
    )
    for record in records:
        print_price_statistics(record.lot or str(record.id), price_statistics(record))

    rejected = False
    try:
        if args.check_weight is not None:
            result = validate_operation(args.check_weight, args.kind, records, config)
            print_validation(f"Add {args.kind} {args.check_weight} kg", result)
            rejected = rejected or not result.accepted

        if args.adjust:
            deltas = _collect_adjustments(args.adjust)
            result = validate_adjustment(deltas, records, config)
            print_validation("Adjust weights", result)
            rejected = rejected or not result.accepted
    except LedgerInputError as e:
        logger.error("[%s] %s", e.code, e.message)
        sys.exit(2)

    sys.exit(1 if rejected else 0)


def _resolve_config(config_path: Path | None) -> LedgerConfig:
    """Load the explicit config, else ./ledger.yaml, else the defaults."""
    if config_path is not None:
        return load_config(config_path)
    default_path = Path.cwd() / CONFIG_FILENAME
    if default_path.exists():
        return load_config(default_path)
    return DEFAULT_CONFIG


def _parse_adjustment(value: str) -> tuple[str, Decimal]:
    """Parse a ``CAT=DELTA`` argument into a (category, delta) pair."""
    category, sep, delta = value.partition("=")
    if not sep or not category.strip():
        raise argparse.ArgumentTypeError(
            f"expected CAT=DELTA (e.g. xl=12.5), got '{value}'"
        )
    try:
        return category.strip(), Decimal(delta.strip())
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(
            f"invalid delta '{delta}' for category '{category}'"
        ) from exc


def _collect_adjustments(pairs: list[tuple[str, Decimal]]) -> dict[str, Decimal]:
    """Merge ``--adjust`` pairs, rejecting a category given more than once.

    Raises:
        LedgerInputError: ERR_011 on an unknown or repeated category.
    """
    deltas: dict[str, Decimal] = {}
    seen: set[Category] = set()
    for key, delta in pairs:
        category = parse_category(key)
        if category in seen:
            raise LedgerInputError(
                code=ErrorCode.ERR_011,
                message=f"--adjust given more than once for category {category.value}",
                field="category",
            )
        seen.add(category)
        deltas[key] = delta
    return deltas
