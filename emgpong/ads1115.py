"""Driver for the ADS1015/ADS1115 analogue-to-digital converters over I2C."""

from __future__ import annotations

import os
import time
from typing import Callable

from emgpong.registers import (
    ADDRESS,
    ADS1015_CONVERSION_DELAY_MS,
    ADS1115_CONVERSION_DELAY_MS,
    MUX_DIFF_0_1,
    MUX_DIFF_2_3,
    POINTER_CONFIG,
    POINTER_CONVERT,
    POINTER_HITHRESH,
    POINTER_MASK,
    Gain,
    comparator_config,
    differential_config,
    single_ended_config,
)

I2C_SLAVE = 0x0703
SINGLE_ENDED_CHANNELS = 4


def _check_register(register: int) -> None:
    if register & ~POINTER_MASK:
        raise ValueError(f"register must be 0..3, got {register}")


def _check_word(value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"register value must fit in 16 bits, got {value}")


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


class I2CBus:
    """A Linux i2c-dev bus talking to one device address."""

    def __init__(self, bus: int = 1, address: int = ADDRESS):
        import fcntl

        self.address = address
        self._fd = os.open(f"/dev/i2c-{bus}", os.O_RDWR)
        try:
            fcntl.ioctl(self._fd, I2C_SLAVE, address)
        except OSError:
            os.close(self._fd)
            raise

    def write_register16(self, register: int, value: int) -> None:
        """Write a 16-bit big-endian word to a pointer register."""
        _check_register(register)
        _check_word(value)
        os.write(self._fd, bytes((register, value >> 8, value & 0xFF)))

    def read_register16(self, register: int) -> int:
        """Read a 16-bit big-endian word from a pointer register."""
        _check_register(register)
        os.write(self._fd, bytes((register,)))
        data = os.read(self._fd, 2)
        if len(data) != 2:
            raise OSError(f"short read from register {register}: {len(data)} bytes")
        return (data[0] << 8) | data[1]

    def close(self) -> None:
        os.close(self._fd)

    def __enter__(self) -> I2CBus:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class MemoryBus:
    """An in-memory register file standing in for a device, recording writes."""

    def __init__(self, registers: dict[int, int] | None = None):
        self.registers: dict[int, int] = {}
        for register, value in (registers or {}).items():
            _check_register(register)
            _check_word(value)
            self.registers[register] = value
        self.writes: list[tuple[int, int]] = []

    def write_register16(self, register: int, value: int) -> None:
        """Store a word and record the write."""
        _check_register(register)
        _check_word(value)
        self.writes.append((register, value))
        self.registers[register] = value

    def read_register16(self, register: int) -> int:
        """Return the stored word, 0 if never written."""
        _check_register(register)
        return self.registers.get(register, 0)


class ADS1015:
    """The 12-bit converter; results are shifted down by four bits."""

    conversion_delay_ms = ADS1015_CONVERSION_DELAY_MS
    bit_shift = 4

    def __init__(
        self,
        bus,
        address: int = ADDRESS,
        sleep: Callable[[float], object] = time.sleep,
    ):
        self.bus = bus
        self.address = address
        self.gain = Gain.ONE
        self._sleep = sleep

    def _wait(self, seconds: float) -> None:
        self._sleep(seconds)

    def _read_conversion(self) -> int:
        return self.bus.read_register16(POINTER_CONVERT) >> self.bit_shift

    def _signed_result(self) -> int:
        result = self._read_conversion()
        if self.bit_shift and result > 0x07FF:
            result |= 0xF000
        return _to_int16(result)

    def read_adc_single_ended(self, channel: int) -> int:
        """Run one conversion on an input; channels above 3 read as 0."""
        if channel >= SINGLE_ENDED_CHANNELS:
            return 0
        config = single_ended_config(channel, self.gain)
        self.bus.write_register16(POINTER_CONFIG, config)
        self._wait(self.conversion_delay_ms / 1000)
        return self._read_conversion()

    def _read_differential(self, mux: int) -> int:
        config = differential_config(mux, self.gain)
        self.bus.write_register16(POINTER_CONFIG, config)
        self._wait(self.conversion_delay_ms / 1000)
        return self._signed_result()

    def read_adc_differential_0_1(self) -> int:
        """Signed difference between AIN0 (P) and AIN1 (N)."""
        return self._read_differential(MUX_DIFF_0_1)

    def read_adc_differential_2_3(self) -> int:
        """Signed difference between AIN2 (P) and AIN3 (N)."""
        return self._read_differential(MUX_DIFF_2_3)

    def start_comparator_single_ended(self, channel: int, threshold: int) -> None:
        """Start continuous conversion with the comparator alerting above threshold."""
        config = comparator_config(channel, self.gain)
        self.bus.write_register16(
            POINTER_HITHRESH, (threshold << self.bit_shift) & 0xFFFF
        )
        self.bus.write_register16(POINTER_CONFIG, config)

    def get_last_conversion_results(self) -> int:
        """Read the latest result without changing the configuration."""
        self._wait(self.conversion_delay_ms / 10_000)
        return self._signed_result()


class ADS1115(ADS1015):
    """The 16-bit converter; results are used unshifted."""

    conversion_delay_ms = ADS1115_CONVERSION_DELAY_MS
    bit_shift = 0

    def __init__(
        self,
        bus,
        address: int = ADDRESS,
        sleep: Callable[[float], object] = time.sleep,
    ):
        super().__init__(bus, address, sleep)