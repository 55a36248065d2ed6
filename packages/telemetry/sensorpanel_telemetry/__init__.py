"""Sensor acquisition pipeline for SensorPanel."""

from .cpuinfo import CPUINFO_PATH, FrequencySource, parse_cpuinfo
from .decoder import CPU_DEVICE_PREFIX, TelemetryDecoder, decode_devices, find_cpu_device, parse_zen2
from .errors import (
    AcquisitionError,
    CannotParseTelemetryOutput,
    CannotReadProcessorInfo,
    CommandFailed,
    MissingTelemetryField,
    SpawnFailed,
    UnsupportedCpuFamily,
)
from .models import (
    CoreReading,
    CpuTelemetry,
    Device,
    DeviceMap,
    GenericTelemetry,
    GraphicsTelemetry,
    Snapshot,
    TemperatureReading,
    Zen2Reading,
)
from .provider import SENSORS_COMMAND, SensorSnapshotBuilder

__all__ = [
    "AcquisitionError",
    "CPUINFO_PATH",
    "CPU_DEVICE_PREFIX",
    "CannotParseTelemetryOutput",
    "CannotReadProcessorInfo",
    "CommandFailed",
    "CoreReading",
    "CpuTelemetry",
    "Device",
    "DeviceMap",
    "FrequencySource",
    "GenericTelemetry",
    "GraphicsTelemetry",
    "MissingTelemetryField",
    "SENSORS_COMMAND",
    "SensorSnapshotBuilder",
    "Snapshot",
    "SpawnFailed",
    "TelemetryDecoder",
    "TemperatureReading",
    "UnsupportedCpuFamily",
    "Zen2Reading",
    "decode_devices",
    "find_cpu_device",
    "parse_cpuinfo",
    "parse_zen2",
]
