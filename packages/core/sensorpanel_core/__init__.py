"""Core app services for settings, logging, polling, and diagnostics."""

from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .poller import POLL_INTERVAL_S, PollOutcome, Poller, PollerStats

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "POLL_INTERVAL_S",
    "PollOutcome",
    "Poller",
    "PollerStats",
    "build_doctor_payload",
    "load_config",
    "save_config",
]
