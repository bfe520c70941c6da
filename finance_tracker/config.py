# finance_tracker/config.py
from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "finance.db",
    "user_id": "local",
    "currency": "BRL",
    "report_months": 6,
    "output_dir": "./data",
    "loaders": {
        "csv": "finance_tracker.loaders.csv_loader.CSVLoader",
    },
    "output_modules": {
        "csv": "finance_tracker.outputs.csv_output.CSVOutput",
        "excel": "finance_tracker.outputs.excel_output.ExcelOutput",
    },
}

LOG_LEVEL_ENV = "FINANCE_TRACKER_LOG_LEVEL"


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Read a YAML config file, filling anything missing from DEFAULT_CONFIG.

    A missing file is not an error: the defaults are returned as-is.
    """
    if path is None:
        return _merge_defaults({}, copy.deepcopy(DEFAULT_CONFIG))
    target = Path(path)
    if not target.exists():
        logger.info("Config file %s not found, using defaults", target)
        return _merge_defaults({}, copy.deepcopy(DEFAULT_CONFIG))
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {target} must contain a mapping")
    return _merge_defaults(data, copy.deepcopy(DEFAULT_CONFIG))


def save_config(config: Dict[str, object], path: str | Path) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv(LOG_LEVEL_ENV, "WARNING")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
