"""
Settings resolution for the check-in tool.

Priority, lowest first:
  defaults < JSON config file < environment (CHECKIN_*) < CLI flags

Config file example:
  {"store": "data/scans.csv", "export_dir": "exports", "duplicate_window_hours": 2}
"""

from __future__ import annotations

import json
import logging
import math
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

LOGGER_NAME = "checkin"

DEFAULT_STORE = "scans.csv"
DEFAULT_WINDOW_HOURS = 2.0

ENV_CONFIG = "CHECKIN_CONFIG"
ENV_STORE = "CHECKIN_STORE"
ENV_EXPORT_DIR = "CHECKIN_EXPORT_DIR"
ENV_WINDOW = "CHECKIN_DUPLICATE_WINDOW_HOURS"
ENV_VERBOSE = "CHECKIN_VERBOSE"

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    store_path: Path = Path(DEFAULT_STORE)
    export_dir: Path = Path(".")
    duplicate_window_hours: float = DEFAULT_WINDOW_HOURS
    verbose: bool = False


def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    return bool(v)


def window_hours(value: Any) -> float:
    """Duplicate window length in hours: a finite number above zero."""
    if isinstance(value, bool):
        raise TypeError(f"duplicate window must be a number: {value!r}")
    hours = float(value)
    if not math.isfinite(hours) or hours <= 0:
        raise ValueError(f"duplicate window must be positive: {value!r}")
    return hours


def load_config(path: Path) -> dict[str, Any]:
    """Read a JSON config file. Unreadable or non-object files yield {}."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("config load failed: %s (%s)", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("config must be a JSON object: %s", path)
        return {}
    return data


def _apply_config(settings: Settings, cfg: Mapping[str, Any]) -> None:
    if "store" in cfg:
        settings.store_path = Path(str(cfg["store"]))
    if "export_dir" in cfg:
        settings.export_dir = Path(str(cfg["export_dir"]))
    if "duplicate_window_hours" in cfg:
        try:
            settings.duplicate_window_hours = window_hours(cfg["duplicate_window_hours"])
        except (TypeError, ValueError) as e:
            logger.error("ignoring duplicate_window_hours in config: %s", e)
    if "verbose" in cfg:
        settings.verbose = bool(cfg["verbose"])


def _apply_env(settings: Settings, env: Mapping[str, str]) -> None:
    if env.get(ENV_STORE):
        settings.store_path = Path(env[ENV_STORE])
    if env.get(ENV_EXPORT_DIR):
        settings.export_dir = Path(env[ENV_EXPORT_DIR])
    if env.get(ENV_WINDOW):
        settings.duplicate_window_hours = window_hours(env[ENV_WINDOW])
    if env.get(ENV_VERBOSE):
        settings.verbose = parse_bool(env[ENV_VERBOSE])


def resolve_settings(
    config_path: Path | None = None,
    store: Path | None = None,
    export_dir: Path | None = None,
    verbose: bool | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build the effective settings.

    CLI values are passed as keyword arguments; None means "not given on the
    command line" so lower layers may fill it in.
    """
    if env is None:
        env = os.environ

    settings = Settings()

    if config_path is None and env.get(ENV_CONFIG):
        config_path = Path(env[ENV_CONFIG])
    if config_path is not None:
        _apply_config(settings, load_config(config_path))

    _apply_env(settings, env)

    if store is not None:
        settings.store_path = store
    if export_dir is not None:
        settings.export_dir = export_dir
    if verbose:
        settings.verbose = True

    settings.duplicate_window_hours = window_hours(settings.duplicate_window_hours)
    return settings


def setup_logger(verbose: bool) -> logging.Logger:
    """
    Send diagnostics to stderr; stdout is for operator messages.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(logging.INFO if verbose else logging.WARNING)
    log.propagate = False

    log.handlers.clear()

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(handler)
    return log
