"""Doctor payload and local support bundle export."""

from __future__ import annotations

import json
import os
import platform
import shutil
import tempfile
import zipfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import psutil

from sensorpanel_telemetry import CPUINFO_PATH, SENSORS_COMMAND, AcquisitionError, SensorSnapshotBuilder

from .config import AppConfig, config_path
from .logging_setup import log_dir


def _acquisition_probe(builder: SensorSnapshotBuilder) -> dict[str, Any]:
    try:
        snapshot = builder.fetch()
    except AcquisitionError as exc:
        return {"ok": False, "error": exc.kind, "message": str(exc)}
    return {"ok": True, "snapshot": snapshot.to_dict()}


def build_doctor_payload(cfg: AppConfig, builder: SensorSnapshotBuilder | None = None) -> dict[str, Any]:
    builder = builder or SensorSnapshotBuilder()
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": asdict(cfg),
        "sensors_binary": shutil.which(SENSORS_COMMAND[0]),
        "cpuinfo_readable": os.access(CPUINFO_PATH, os.R_OK),
        "cpu_count": {
            "logical": psutil.cpu_count(logical=True),
            "physical": psutil.cpu_count(logical=False),
        },
        "acquisition": _acquisition_probe(builder),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "SensorPanel") -> None:
        self.app_name = app_name

    def bundle(self, cfg: AppConfig, doctor_payload: dict[str, Any], output_dir: Path | None = None) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"sensorpanel-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(doctor_payload, indent=2, sort_keys=True, default=str))
            zf.writestr("config.json", json.dumps(asdict(cfg), indent=2, sort_keys=True))
            # fault.log is matched by the glob above
            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
