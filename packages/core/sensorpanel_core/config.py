"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class UiConfig:
    window_width: int = 800
    window_height: int = 480
    show_core_list: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    keep_log_files: int = 7
    console: bool = False


@dataclass
class ReportingConfig:
    suppress_repeated_errors: bool = True


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    ui: UiConfig = field(default_factory=UiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "SensorPanel"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "SensorPanel"
    return Path.home() / ".config" / "sensorpanel"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _clamp_int(value: Any, low: int, high: int, default: int) -> int:
    try:
        return max(low, min(high, int(value)))
    except (TypeError, ValueError):
        return default


def _normalize_ui(cfg: AppConfig) -> None:
    cfg.ui.window_width = _clamp_int(cfg.ui.window_width, 320, 3840, UiConfig.window_width)
    cfg.ui.window_height = _clamp_int(cfg.ui.window_height, 240, 2160, UiConfig.window_height)
    cfg.ui.show_core_list = bool(cfg.ui.show_core_list)


def _normalize_logging(cfg: AppConfig) -> None:
    level = str(cfg.logging.level).upper()
    cfg.logging.level = level if level in LOG_LEVELS else "INFO"
    cfg.logging.keep_log_files = _clamp_int(cfg.logging.keep_log_files, 2, 365, LoggingConfig.keep_log_files)
    cfg.logging.console = bool(cfg.logging.console)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    data = dict(raw)
    # Pre-release files kept the repeat flag at top level.
    if "suppress_repeated_errors" in data:
        reporting = dict(data.get("reporting", {}) or {})
        reporting.setdefault("suppress_repeated_errors", data.pop("suppress_repeated_errors"))
        data["reporting"] = reporting
    data["config_version"] = CONFIG_VERSION
    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        ui=_merge(UiConfig, data.get("ui", {})),
        logging=_merge(LoggingConfig, data.get("logging", {})),
        reporting=_merge(ReportingConfig, data.get("reporting", {})),
    )

    _normalize_ui(cfg)
    _normalize_logging(cfg)
    cfg.reporting.suppress_repeated_errors = bool(cfg.reporting.suppress_repeated_errors)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
