"""Signal chain for the control input: high-pass filtering, power, smoothing and logging."""

from __future__ import annotations

import math
import os
from collections import deque
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterator

import numpy as np
from scipy import signal

FILTER_ORDER = 40
CUTOFF_FREQUENCY = 50.0
SAMPLING_RATE = 860.0
SYNTHETIC_SAMPLING_RATE = 1000.0
PLOT_DATA_SIZE = 100
CHANNEL_FILE_LIMIT = 30000

ORIGINAL_FILE = "origin.dat"
FILTERED_FILE = "flhp1ed.dat"
POWER_FILE = "flpowertimesmooth.dat"

SYNTHETIC_FREQUENCIES = (2, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 200)


class HighPassFilter:
    """A Butterworth high-pass filter applied one sample at a time."""

    def __init__(
        self,
        sampling_rate: float = SAMPLING_RATE,
        cutoff: float = CUTOFF_FREQUENCY,
        order: int = FILTER_ORDER,
    ):
        if order < 1:
            raise ValueError(f"filter order must be at least 1, got {order}")
        if sampling_rate <= 0:
            raise ValueError(f"sampling rate must be positive, got {sampling_rate}")
        if not 0 < cutoff < sampling_rate / 2:
            raise ValueError(
                f"cutoff must lie between 0 and {sampling_rate / 2} Hz, got {cutoff}"
            )
        self.sampling_rate = sampling_rate
        self.cutoff = cutoff
        self.order = order
        self._sos = signal.butter(
            order, cutoff, btype="highpass", fs=sampling_rate, output="sos"
        )
        self._state = np.zeros((self._sos.shape[0], 2))

    def filter(self, value: float) -> float:
        """Feed one sample through the filter and return the filtered sample."""
        out, self._state = signal.sosfilt(self._sos, [value], zi=self._state)
        return float(out[0])


@dataclass(frozen=True)
class ProcessedSample:
    """One input sample with its filtered value, power and smoothed power."""

    original: float
    filtered: float
    power: float
    smoothed_power: float


class SignalProcessor:
    """Filters samples and keeps a moving window of the recent results."""

    def __init__(
        self,
        sampling_rate: float = SAMPLING_RATE,
        cutoff: float = CUTOFF_FREQUENCY,
        order: int = FILTER_ORDER,
        window_size: int = PLOT_DATA_SIZE,
    ):
        if window_size < 1:
            raise ValueError(f"window size must be at least 1, got {window_size}")
        self.window_size = window_size
        self._filter = HighPassFilter(sampling_rate, cutoff, order)
        self._original = deque([0.0] * window_size, maxlen=window_size)
        self._filtered = deque([0.0] * window_size, maxlen=window_size)
        self._smoothed = deque([0.0] * window_size, maxlen=window_size)
        self._sum_power = 0.0
        self.count = 0

    def process(self, value: float) -> ProcessedSample:
        """Filter a sample, update the windows and return the results."""
        filtered = self._filter.filter(value)
        power = filtered**2
        # The oldest filtered value leaves the window, so its power leaves the sum.
        self._sum_power -= self._filtered[0] ** 2
        self._sum_power += power
        smoothed = self._sum_power / self.window_size

        self._original.append(float(value))
        self._filtered.append(filtered)
        self._smoothed.append(smoothed)
        self.count += 1
        return ProcessedSample(float(value), filtered, power, smoothed)

    def original(self) -> list[float]:
        """The window of raw input samples, oldest first."""
        return list(self._original)

    def filtered(self) -> list[float]:
        """The window of filtered samples, oldest first."""
        return list(self._filtered)

    def smoothed_power(self) -> list[float]:
        """The window of time-smoothed power values, oldest first."""
        return list(self._smoothed)


class SampleLogger:
    """Writes raw, filtered and power values to three data files, one per line."""

    def __init__(self, directory: str | os.PathLike = "."):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._files = []
        try:
            for name in (FILTERED_FILE, ORIGINAL_FILE, POWER_FILE):
                self._files.append(open(self.directory / name, "w", encoding="ascii"))
        except OSError:
            self.close()
            raise
        self._filtered_file, self._original_file, self._power_file = self._files

    def write(self, sample: ProcessedSample) -> None:
        """Append one processed sample to the data files."""
        self._original_file.write(f"{sample.original:e}\n")
        self._filtered_file.write(f"{sample.filtered:e}\n")
        self._power_file.write(f"{sample.power:e}\n")

    def close(self) -> None:
        for handle in self._files:
            handle.close()

    def __enter__(self) -> SampleLogger:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def synthetic_input(count: int, gain: float = 2.0) -> Iterator[float]:
    """Yield the generated test signal: a sum of sines sampled at integer steps."""
    for n in range(count):
        yield gain * sum(
            math.sin(frequency * 2.0 * math.pi * n)
            for frequency in SYNTHETIC_FREQUENCIES
        )


def _parse_number(line: str) -> float:
    text = line.strip()
    if not text or "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def read_channel_files(
    path1: str | os.PathLike,
    path2: str | os.PathLike,
    limit: int = CHANNEL_FILE_LIMIT,
) -> tuple[list[float], list[float]]:
    """Read two files of numbers line by line in step, stopping at the shorter one.

    Lines that do not parse read as 0.0.
    """
    data1: list[float] = []
    data2: list[float] = []
    with open(path1, encoding="ascii", errors="replace") as file1, open(
        path2, encoding="ascii", errors="replace"
    ) as file2:
        for line1, line2 in islice(zip(file1, file2), limit):
            data1.append(_parse_number(line1))
            data2.append(_parse_number(line2))
    return data1, data2