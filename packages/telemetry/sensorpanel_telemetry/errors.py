"""Acquisition error taxonomy.

Every failure of one poll cycle is raised as a subclass of
:class:`AcquisitionError`. The underlying cause, when there is one, is
chained through ``__cause__``.
"""

from __future__ import annotations

from collections.abc import Sequence


class AcquisitionError(Exception):
    kind = "acquisition_error"


class SpawnFailed(AcquisitionError):
    kind = "spawn_failed"

    def __init__(self, command: Sequence[str]) -> None:
        self.command = tuple(command)
        super().__init__(f"failed to spawn command `{' '.join(self.command)}`")


class CommandFailed(AcquisitionError):
    kind = "command_failed"

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"`{' '.join(self.command)}` exited with status {returncode}"
        if stderr:
            msg = f"{msg}: {stderr}"
        super().__init__(msg)


class CannotParseTelemetryOutput(AcquisitionError):
    kind = "cannot_parse_telemetry_output"

    def __init__(self, reason: str = "cannot parse `sensors` output") -> None:
        super().__init__(reason)


class UnsupportedCpuFamily(AcquisitionError):
    kind = "unsupported_cpu_family"

    def __init__(self, prefix: str, devices: Sequence[str] = ()) -> None:
        self.prefix = prefix
        self.devices = tuple(devices)
        super().__init__(f"no `{prefix}*` sensor device found (seen: {', '.join(self.devices) or 'none'})")


class MissingTelemetryField(AcquisitionError):
    kind = "missing_telemetry_field"

    def __init__(self, outer: str, inner: str) -> None:
        self.outer = outer
        self.inner = inner
        super().__init__(f"missing or non-numeric telemetry field {outer}.{inner}")


class CannotReadProcessorInfo(AcquisitionError):
    kind = "cannot_read_processor_info"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"cannot read `{path}`")
