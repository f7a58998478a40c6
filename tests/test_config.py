"""Tests for lotledger.config module.

Covers existence checks, YAML validation, unknown-key rejection, value
bounds, and the directory/file path forms.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
import yaml

from lotledger.config import CONFIG_FILENAME, DEFAULT_CONFIG, load_config
from lotledger.errors import ConfigError, ErrorCode
from lotledger.models import LedgerConfig

# ---------------------------------------------------------------------------
# Helpers for building synthetic config files in tmp_path
# ---------------------------------------------------------------------------


def _write_config(tmp_path: Path, data: Any) -> Path:
    """Write ``data`` as ledger.yaml in tmp_path and return the file path."""
    path = tmp_path / CONFIG_FILENAME
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Valid configurations
# ---------------------------------------------------------------------------


def test_project_config_loads(ledger_config: LedgerConfig) -> None:
    """The shipped config/ledger.yaml matches the built-in defaults."""
    assert ledger_config.progress_decimals == DEFAULT_CONFIG.progress_decimals
    assert ledger_config.message_decimals == DEFAULT_CONFIG.message_decimals
    assert ledger_config.max_progress == DEFAULT_CONFIG.max_progress
    assert ledger_config.warning_threshold.quantize(Decimal("0.01")) == Decimal("0.95")


def test_load_from_directory(tmp_path: Path) -> None:
    _write_config(tmp_path, {"progress_decimals": 1})
    config = load_config(tmp_path)
    assert config.progress_decimals == 1


def test_load_from_file_path(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"warning_threshold": 0.5})
    config = load_config(path)
    assert config.warning_threshold == Decimal("0.5")


def test_partial_config_keeps_defaults(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"message_decimals": 3})
    config = load_config(path)
    assert config.message_decimals == 3
    assert config.progress_decimals == DEFAULT_CONFIG.progress_decimals
    assert config.max_progress == DEFAULT_CONFIG.max_progress


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DEFAULT_CONFIG


# ---------------------------------------------------------------------------
# Error paths
# ---------------------------------------------------------------------------


def test_missing_file_err_001(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path / "nope.yaml")
    assert exc_info.value.code == ErrorCode.ERR_001
    assert exc_info.value.path is not None


def test_missing_file_in_directory_err_001(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path)
    assert exc_info.value.code == ErrorCode.ERR_001


def test_invalid_yaml_err_002(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("warning_threshold: [0.9\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ErrorCode.ERR_002


def test_non_mapping_document_err_002(tmp_path: Path) -> None:
    path = _write_config(tmp_path, [1, 2, 3])
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ErrorCode.ERR_002
    assert "mapping" in exc_info.value.message


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("warning_threshold", 0),
        ("warning_threshold", 2),
        ("progress_decimals", -1),
        ("message_decimals", "many"),
        ("max_progress", 50),
    ],
)
def test_out_of_range_value_err_002(tmp_path: Path, key: str, value: Any) -> None:
    path = _write_config(tmp_path, {key: value})
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ErrorCode.ERR_002
    assert key in exc_info.value.message


def test_unknown_key_err_003(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"warning_threshold": 0.5, "colour": "red"})
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ErrorCode.ERR_003
    assert "colour" in exc_info.value.message
