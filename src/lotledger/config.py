"""Configuration loader for LotLedger.

Loads and validates ledger.yaml into a LedgerConfig. Every engine
operation accepts an optional config and falls back to DEFAULT_CONFIG.

Error codes owned by this module: ERR_001, ERR_002, ERR_003.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lotledger.errors import ConfigError, ErrorCode
from lotledger.models import LedgerConfig

CONFIG_FILENAME = "ledger.yaml"

DEFAULT_CONFIG = LedgerConfig()
"""Thresholds used when a caller supplies no configuration."""

_KNOWN_KEYS: frozenset[str] = frozenset(LedgerConfig.model_fields)


def load_config(path: Path) -> LedgerConfig:
    """Load ledger.yaml and return a validated LedgerConfig.

    ``path`` may point at the YAML file itself or at a directory holding
    ``ledger.yaml``. Keys absent from the file keep their defaults. An
    empty file yields the default configuration.

    Args:
        path: Path to ledger.yaml or to its parent directory.

    Returns:
        Frozen LedgerConfig.

    Raises:
        ConfigError: ERR_001 if the file does not exist, ERR_002 on
            unparsable YAML or invalid values, ERR_003 on unknown keys.
    """
    yaml_path = path / CONFIG_FILENAME if path.is_dir() else path

    if not yaml_path.exists():
        raise ConfigError(
            code=ErrorCode.ERR_001,
            message=f"Config file not found: {yaml_path}",
            path=str(yaml_path),
        )

    data = _load_yaml(yaml_path)

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(
            code=ErrorCode.ERR_003,
            message=(
                f"Unknown key(s) in {yaml_path.name}: {', '.join(unknown)}"
            ),
            path=str(yaml_path),
        )

    try:
        return LedgerConfig.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise ConfigError(
            code=ErrorCode.ERR_002,
            message=f"Invalid value for '{key}' in {yaml_path.name}: {first['msg']}",
            path=str(yaml_path),
        ) from exc


def _load_yaml(yaml_path: Path) -> dict[str, Any]:
    """Parse the YAML document, requiring a mapping at the top level.

    Args:
        yaml_path: Path to ledger.yaml.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigError: ERR_002 on a YAML syntax error or non-mapping document.
    """
    try:
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(
            code=ErrorCode.ERR_002,
            message=f"Cannot parse {yaml_path.name}: {exc}",
            path=str(yaml_path),
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            code=ErrorCode.ERR_002,
            message=(
                f"{yaml_path.name} must contain a mapping, "
                f"got {type(data).__name__}"
            ),
            path=str(yaml_path),
        )
    return data
