"""Typed sensor snapshot models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class CoreReading:
    freq_mhz: float


@dataclass(frozen=True)
class TemperatureReading:
    """Base for per-family CPU temperature/voltage/current records."""

    family: ClassVar[str] = "unknown"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"family": self.family}
        payload.update(asdict(self))
        return payload


@dataclass(frozen=True)
class Zen2Reading(TemperatureReading):
    family: ClassVar[str] = "zen2"

    voltage_core: float
    voltage_soc: float
    current_core: float
    current_soc: float
    temp_die: float
    temp_ctl: float
    temp_ccd1: float
    temp_ccd2: float


@dataclass(frozen=True)
class CpuTelemetry:
    cores: tuple[CoreReading, ...]
    temperature: TemperatureReading


@dataclass(frozen=True)
class GraphicsTelemetry:
    pass


@dataclass(frozen=True)
class GenericTelemetry:
    pass


@dataclass(frozen=True)
class Snapshot:
    cpu: CpuTelemetry | None
    graphics: GraphicsTelemetry | None = None
    others: tuple[GenericTelemetry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        cpu = None
        if self.cpu is not None:
            cpu = {
                "cores_mhz": [core.freq_mhz for core in self.cpu.cores],
                "temperature": self.cpu.temperature.to_dict(),
            }
        return {
            "cpu": cpu,
            "graphics": (asdict(self.graphics) if self.graphics is not None else None),
            "others": [asdict(o) for o in self.others],
        }


@dataclass
class Device:
    """One chip entry of the `sensors -j` output."""

    adapter: str
    fields: dict[str, Any] = field(default_factory=dict)


DeviceMap = dict[str, Device]
