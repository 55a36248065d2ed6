"""Sensor snapshot acquisition: `sensors -j` plus per-core frequencies."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from .cpuinfo import FrequencySource
from .decoder import TelemetryDecoder
from .errors import CommandFailed, SpawnFailed
from .models import CpuTelemetry, Snapshot


SENSORS_COMMAND: tuple[str, ...] = ("sensors", "-j")

_log = logging.getLogger("sensorpanel.telemetry")


class SensorSnapshotBuilder:
    """Runs one blocking acquisition cycle and assembles a :class:`Snapshot`.

    Any failure raises an :class:`~sensorpanel_telemetry.errors.AcquisitionError`
    subclass; a snapshot is only returned once every step succeeded.
    Retrying is left to the caller.
    """

    def __init__(
        self,
        command: Sequence[str] = SENSORS_COMMAND,
        frequency_source: FrequencySource | None = None,
        decoder: TelemetryDecoder | None = None,
    ) -> None:
        self.command = tuple(command)
        self._frequencies = frequency_source or FrequencySource()
        self._decoder = decoder or TelemetryDecoder()

    def _run_command(self) -> bytes:
        try:
            result = subprocess.run(list(self.command), capture_output=True, check=False)
        except OSError as exc:
            raise SpawnFailed(self.command) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise CommandFailed(self.command, result.returncode, stderr)
        return result.stdout

    def fetch(self) -> Snapshot:
        raw = self._run_command()
        temperature = self._decoder.decode(raw)
        cores = self._frequencies.fetch()
        _log.debug("acquired %d core readings, %s temperature record", len(cores), temperature.family)
        return Snapshot(cpu=CpuTelemetry(cores=cores, temperature=temperature))
