"""Decoding of `sensors -j` output into a CPU temperature reading."""

from __future__ import annotations

import json
import logging
from typing import Any

from .errors import CannotParseTelemetryOutput, MissingTelemetryField, UnsupportedCpuFamily
from .models import Device, DeviceMap, TemperatureReading, Zen2Reading


CPU_DEVICE_PREFIX = "k10temp"

# (attribute, outer key, inner key), in extraction order.
ZEN2_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("voltage_core", "Vcore", "in0_input"),
    ("voltage_soc", "Vsoc", "in1_input"),
    ("current_core", "Icore", "curr1_input"),
    ("current_soc", "Isoc", "curr2_input"),
    ("temp_die", "Tdie", "temp1_input"),
    ("temp_ctl", "Tctl", "temp2_input"),
    ("temp_ccd1", "Tccd1", "temp3_input"),
    ("temp_ccd2", "Tccd2", "temp4_input"),
)

_log = logging.getLogger("sensorpanel.telemetry")


def decode_devices(raw: bytes) -> DeviceMap:
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise CannotParseTelemetryOutput(f"cannot parse `sensors` output: {exc}") from exc

    if not isinstance(data, dict):
        raise CannotParseTelemetryOutput("`sensors` output is not a JSON object")

    devices: DeviceMap = {}
    for ident, entry in data.items():
        if not isinstance(entry, dict):
            raise CannotParseTelemetryOutput(f"device `{ident}` is not a JSON object")
        adapter = entry.get("Adapter")
        if not isinstance(adapter, str):
            raise CannotParseTelemetryOutput(f"device `{ident}` has no `Adapter` name")
        fields = {k: v for k, v in entry.items() if k != "Adapter"}
        devices[ident] = Device(adapter=adapter, fields=fields)
    return devices


def find_cpu_device(devices: DeviceMap, prefix: str = CPU_DEVICE_PREFIX) -> tuple[str, Device]:
    for ident, device in devices.items():
        if ident.startswith(prefix):
            return ident, device
    raise UnsupportedCpuFamily(prefix, list(devices))


def _number(fields: dict[str, Any], outer: str, inner: str) -> float:
    channel = fields.get(outer)
    if not isinstance(channel, dict):
        raise MissingTelemetryField(outer, inner)
    value = channel.get(inner)
    # bool is an int subclass but never a reading
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MissingTelemetryField(outer, inner)
    try:
        return float(value)
    except OverflowError as exc:
        raise MissingTelemetryField(outer, inner) from exc


def parse_zen2(device: Device) -> Zen2Reading:
    values = {attr: _number(device.fields, outer, inner) for attr, outer, inner in ZEN2_FIELDS}
    return Zen2Reading(**values)


class TelemetryDecoder:
    """Turns raw `sensors -j` bytes into the recognized CPU reading."""

    def decode(self, raw: bytes) -> TemperatureReading:
        devices = decode_devices(raw)
        ident, device = find_cpu_device(devices)
        _log.debug("cpu sensor device %s (%s): %s", ident, device.adapter, device.fields)
        return parse_zen2(device)
