import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from sensorpanel_telemetry.decoder import ZEN2_FIELDS, TelemetryDecoder, decode_devices, find_cpu_device
from sensorpanel_telemetry.errors import CannotParseTelemetryOutput, MissingTelemetryField, UnsupportedCpuFamily
from sensorpanel_telemetry.models import Zen2Reading


def k10temp_device() -> dict:
    return {
        "Adapter": "PCI adapter",
        "Vcore": {"in0_input": 1.25},
        "Vsoc": {"in1_input": 1.05},
        "Icore": {"curr1_input": 10.0},
        "Isoc": {"curr2_input": 3.0},
        "Tdie": {"temp1_input": 45.0, "temp1_max": 70.0},
        "Tctl": {"temp2_input": 47.0},
        "Tccd1": {"temp3_input": 44.0},
        "Tccd2": {"temp4_input": 43.0},
    }


def sensors_output(**devices) -> bytes:
    return json.dumps(devices).encode("utf-8")


class DecodeDevicesTests(unittest.TestCase):
    def test_keeps_document_order_and_adapter(self):
        raw = b'{"nvme-pci-0100":{"Adapter":"PCI adapter","Composite":{"temp1_input":38.85}},' \
              b'"k10temp-pci-00c3":{"Adapter":"PCI adapter"}}'
        devices = decode_devices(raw)
        self.assertEqual(list(devices), ["nvme-pci-0100", "k10temp-pci-00c3"])
        self.assertEqual(devices["nvme-pci-0100"].adapter, "PCI adapter")
        self.assertEqual(devices["nvme-pci-0100"].fields, {"Composite": {"temp1_input": 38.85}})

    def test_invalid_json(self):
        with self.assertRaises(CannotParseTelemetryOutput):
            decode_devices(b"{not json")

    def test_top_level_must_be_object(self):
        with self.assertRaises(CannotParseTelemetryOutput):
            decode_devices(b"[1, 2, 3]")

    def test_device_without_adapter(self):
        with self.assertRaises(CannotParseTelemetryOutput):
            decode_devices(b'{"k10temp-pci-00c3": {"Tdie": {"temp1_input": 40.0}}}')

    def test_deeply_nested_output(self):
        raw = b'{"k10temp-pci-00c3":' + b"[" * 100000
        with self.assertRaises(CannotParseTelemetryOutput):
            decode_devices(raw)

    def test_first_matching_device_wins(self):
        devices = decode_devices(
            b'{"acpitz-acpi-0":{"Adapter":"ACPI interface"},'
            b'"k10temp-pci-00c3":{"Adapter":"first"},'
            b'"k10temp-pci-00cb":{"Adapter":"second"}}'
        )
        ident, device = find_cpu_device(devices)
        self.assertEqual(ident, "k10temp-pci-00c3")
        self.assertEqual(device.adapter, "first")


class TelemetryDecoderTests(unittest.TestCase):
    def setUp(self):
        self.decoder = TelemetryDecoder()

    def test_zen2_fields_copied_verbatim(self):
        raw = sensors_output(**{"k10temp-isa-0000": k10temp_device()})
        reading = self.decoder.decode(raw)
        self.assertIsInstance(reading, Zen2Reading)
        self.assertEqual(reading.family, "zen2")
        self.assertEqual(
            reading,
            Zen2Reading(
                voltage_core=1.25,
                voltage_soc=1.05,
                current_core=10.0,
                current_soc=3.0,
                temp_die=45.0,
                temp_ctl=47.0,
                temp_ccd1=44.0,
                temp_ccd2=43.0,
            ),
        )

    def test_integer_values_accepted(self):
        dev = k10temp_device()
        dev["Tdie"] = {"temp1_input": 45}
        reading = self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
        self.assertEqual(reading.temp_die, 45.0)
        self.assertIsInstance(reading.temp_die, float)

    def test_no_k10temp_device(self):
        raw = sensors_output(**{"nvme-pci-0100": {"Adapter": "PCI adapter"}, "coretemp-isa-0000": {"Adapter": "ISA adapter"}})
        with self.assertRaises(UnsupportedCpuFamily) as ctx:
            self.decoder.decode(raw)
        self.assertEqual(ctx.exception.prefix, "k10temp")
        self.assertEqual(ctx.exception.devices, ("nvme-pci-0100", "coretemp-isa-0000"))

    def test_empty_output_is_unsupported(self):
        with self.assertRaises(UnsupportedCpuFamily):
            self.decoder.decode(b"{}")

    def test_missing_outer_key(self):
        dev = k10temp_device()
        del dev["Tccd2"]
        with self.assertRaises(MissingTelemetryField) as ctx:
            self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
        self.assertEqual((ctx.exception.outer, ctx.exception.inner), ("Tccd2", "temp4_input"))

    def test_missing_inner_key(self):
        dev = k10temp_device()
        dev["Isoc"] = {"curr2_max": 5.0}
        with self.assertRaises(MissingTelemetryField) as ctx:
            self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
        self.assertEqual((ctx.exception.outer, ctx.exception.inner), ("Isoc", "curr2_input"))

    def test_non_numeric_values(self):
        for bad in ("1.25", None, True, [1.25], {"v": 1.25}):
            dev = k10temp_device()
            dev["Vcore"] = {"in0_input": bad}
            with self.subTest(value=bad):
                with self.assertRaises(MissingTelemetryField) as ctx:
                    self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
                self.assertEqual(ctx.exception.outer, "Vcore")

    def test_every_missing_field_is_named(self):
        for attr, outer, inner in ZEN2_FIELDS:
            with self.subTest(field=attr, missing="outer"):
                dev = k10temp_device()
                del dev[outer]
                with self.assertRaises(MissingTelemetryField) as ctx:
                    self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
                self.assertEqual((ctx.exception.outer, ctx.exception.inner), (outer, inner))

            with self.subTest(field=attr, missing="inner"):
                dev = k10temp_device()
                dev[outer] = {"unrelated_input": 1.0}
                with self.assertRaises(MissingTelemetryField) as ctx:
                    self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
                self.assertEqual((ctx.exception.outer, ctx.exception.inner), (outer, inner))

    def test_integer_too_large_for_float(self):
        raw = sensors_output(**{"k10temp-pci-00c3": k10temp_device()}).replace(b"1.25", b"1" + b"0" * 400)
        with self.assertRaises(MissingTelemetryField) as ctx:
            self.decoder.decode(raw)
        self.assertEqual((ctx.exception.outer, ctx.exception.inner), ("Vcore", "in0_input"))
        self.assertIsInstance(ctx.exception.__cause__, OverflowError)

    def test_outer_value_not_an_object(self):
        dev = k10temp_device()
        dev["Tctl"] = 47.0
        with self.assertRaises(MissingTelemetryField) as ctx:
            self.decoder.decode(sensors_output(**{"k10temp-pci-00c3": dev}))
        self.assertEqual(ctx.exception.kind, "missing_telemetry_field")
        self.assertIn("Tctl.temp2_input", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
