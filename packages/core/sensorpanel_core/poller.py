"""Background polling of sensor snapshots with one-way outcome delivery."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from sensorpanel_telemetry import AcquisitionError, SensorSnapshotBuilder, Snapshot

from .logging_setup import get_logger


POLL_INTERVAL_S = 0.25


@dataclass(frozen=True)
class PollOutcome:
    snapshot: Snapshot | None
    error: AcquisitionError | None
    started_utc: datetime
    duration_s: float

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        row: dict = {
            "ts_utc": self.started_utc.isoformat(),
            "duration_s": self.duration_s,
            "ok": self.ok,
        }
        if self.snapshot is not None:
            row["snapshot"] = self.snapshot.to_dict()
        if self.error is not None:
            row["error"] = self.error.kind
            row["message"] = str(self.error)
        return row


@dataclass
class PollerStats:
    cycles: int = 0
    failures: int = 0
    overruns: int = 0
    last_duration_s: float = 0.0


class Poller:
    """Runs the acquisition pipeline on a fixed cadence in a worker thread.

    Each outcome is handed to ``deliver`` from the worker thread; the
    callable must only enqueue (``queue.Queue.put``, a Qt signal emit)
    and never touch presentation state directly. Cycles never overlap:
    an overrun starts the next cycle straight away instead of queuing
    extra work.
    """

    def __init__(
        self,
        builder: SensorSnapshotBuilder | None = None,
        deliver: Callable[[PollOutcome], None] | None = None,
        interval_s: float = POLL_INTERVAL_S,
        suppress_repeated_errors: bool = True,
    ) -> None:
        self.builder = builder or SensorSnapshotBuilder()
        self.deliver = deliver
        self.interval_s = interval_s
        self.suppress_repeated_errors = suppress_repeated_errors

        self._log = get_logger("poller")
        self._stats = PollerStats()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_error_key: tuple[str, str] | None = None

    @property
    def stats(self) -> PollerStats:
        return self._stats

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _report(self, outcome: PollOutcome) -> None:
        if outcome.error is None:
            if self._last_error_key is not None:
                self._log.info("sensor acquisition recovered", extra={"event": "poll_recovered"})
            self._last_error_key = None
            return

        key = (outcome.error.kind, str(outcome.error))
        repeated = key == self._last_error_key
        self._last_error_key = key
        log = self._log.debug if (repeated and self.suppress_repeated_errors) else self._log.warning
        log(
            "sensor acquisition failed: %s",
            outcome.error,
            extra={"event": "poll_error", "kind": outcome.error.kind},
        )

    def poll_once(self) -> PollOutcome:
        started_utc = datetime.now(timezone.utc)
        start = time.perf_counter()
        snapshot: Snapshot | None = None
        error: AcquisitionError | None = None
        try:
            snapshot = self.builder.fetch()
        except AcquisitionError as exc:
            error = exc
        duration = time.perf_counter() - start

        self._stats.cycles += 1
        self._stats.last_duration_s = duration
        if error is not None:
            self._stats.failures += 1

        outcome = PollOutcome(snapshot=snapshot, error=error, started_utc=started_utc, duration_s=duration)
        self._report(outcome)
        return outcome

    def _run(self, stop: threading.Event) -> None:
        self._log.info("poller started", extra={"event": "poller_started"})
        while not stop.is_set():
            outcome = self.poll_once()
            if self.deliver is not None:
                self.deliver(outcome)

            remaining = self.interval_s - outcome.duration_s
            if remaining <= 0:
                self._stats.overruns += 1
                self._log.debug("poll cycle overran interval by %.3fs", -remaining)
                continue
            stop.wait(remaining)
        self._log.info("poller stopped", extra={"event": "poller_stopped"})

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            if not self._stop.is_set():
                return
            # A stopped worker may still be inside its last cycle.
            self._thread.join()
        # Each run owns its event so a restart cannot revive an old worker.
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop,), name="sensorpanel-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None
