"""Per-core clock frequencies from the processor information file."""

from __future__ import annotations

import re
from pathlib import Path

from .errors import CannotReadProcessorInfo
from .models import CoreReading


CPUINFO_PATH = "/proc/cpuinfo"
_FREQ_LABEL = "cpu MHz"
# ASCII decimal or exponent form, plus inf/infinity/nan in any case.
_FLOAT_RE = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)", re.ASCII | re.IGNORECASE)


def _block_freq(block: str) -> float | None:
    for line in block.splitlines():
        if not line.startswith(_FREQ_LABEL):
            continue
        _label, sep, value = line.partition(":")
        if not sep:
            return None
        value = value.strip()
        if not _FLOAT_RE.fullmatch(value):
            return None
        return float(value)
    return None


def parse_cpuinfo(text: str) -> tuple[CoreReading, ...]:
    cores = []
    for block in text.split("\n\n"):
        freq = _block_freq(block)
        if freq is not None:
            cores.append(CoreReading(freq_mhz=freq))
    return tuple(cores)


class FrequencySource:
    def __init__(self, path: str | Path = CPUINFO_PATH) -> None:
        self.path = Path(path)

    def fetch(self) -> tuple[CoreReading, ...]:
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise CannotReadProcessorInfo(str(self.path)) from exc
        return parse_cpuinfo(text)
