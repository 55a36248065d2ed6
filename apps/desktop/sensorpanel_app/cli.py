"""CLI entrypoints for the SensorPanel window, one-shot snapshots, and diagnostics."""

from __future__ import annotations

import argparse
import json
import queue
from pathlib import Path

from sensorpanel_core import DiagnosticsExporter, Poller, build_doctor_payload, load_config
from sensorpanel_core.logging_setup import configure_logging
from sensorpanel_telemetry import AcquisitionError, SensorSnapshotBuilder


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui()


def cmd_snapshot(_args: argparse.Namespace) -> int:
    try:
        snapshot = SensorSnapshotBuilder().fetch()
    except AcquisitionError as exc:
        _print_json({"error": exc.kind, "message": str(exc)})
        return 2
    _print_json(snapshot.to_dict())
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    cfg = load_config()
    mailbox: queue.Queue = queue.Queue()
    poller = Poller(deliver=mailbox.put, suppress_repeated_errors=cfg.reporting.suppress_repeated_errors)

    seen = 0
    poller.start()
    try:
        while args.count <= 0 or seen < args.count:
            outcome = mailbox.get()
            print(json.dumps(outcome.to_dict(), sort_keys=True), flush=True)
            seen += 1
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sensorpanel", description="CPU sensor monitor and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run desktop window")
    run_cmd.set_defaults(func=cmd_run)

    snap_cmd = sub.add_parser("snapshot", help="Print one sensor snapshot as JSON")
    snap_cmd.set_defaults(func=cmd_snapshot)

    watch_cmd = sub.add_parser("watch", help="Print a JSON line per poll cycle")
    watch_cmd.add_argument("--count", type=int, default=0, help="Stop after N cycles (0 runs until interrupted)")
    watch_cmd.set_defaults(func=cmd_watch)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and a test acquisition")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(level=cfg.logging.level, keep_files=cfg.logging.keep_log_files, console=cfg.logging.console)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
