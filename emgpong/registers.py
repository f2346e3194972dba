"""Register map and configuration words of the ADS1015/ADS1115 converters."""

from enum import IntEnum

ADDRESS = 0x48

ADS1015_CONVERSION_DELAY_MS = 10
ADS1115_CONVERSION_DELAY_MS = 10

# Pointer register
POINTER_MASK = 0x03
POINTER_CONVERT = 0x00
POINTER_CONFIG = 0x01
POINTER_LOWTHRESH = 0x02
POINTER_HITHRESH = 0x03

# Config register: operational status
OS_MASK = 0x8000
OS_SINGLE = 0x8000
OS_BUSY = 0x0000
OS_NOTBUSY = 0x8000

# Config register: input multiplexer
MUX_MASK = 0x7000
MUX_DIFF_0_1 = 0x0000
MUX_DIFF_0_3 = 0x1000
MUX_DIFF_1_3 = 0x2000
MUX_DIFF_2_3 = 0x3000
MUX_SINGLE_0 = 0x4000
MUX_SINGLE_1 = 0x5000
MUX_SINGLE_2 = 0x6000
MUX_SINGLE_3 = 0x7000

# Config register: programmable gain amplifier
PGA_MASK = 0x0E00
PGA_6_144V = 0x0000
PGA_4_096V = 0x0200
PGA_2_048V = 0x0400
PGA_1_024V = 0x0600
PGA_0_512V = 0x0800
PGA_0_256V = 0x0A00

# Config register: conversion mode
MODE_MASK = 0x0100
MODE_CONTIN = 0x0000
MODE_SINGLE = 0x0100

# Config register: data rate
DR_MASK = 0x00E0
DR_128SPS = 0x0000
DR_250SPS = 0x0020
DR_490SPS = 0x0040
DR_920SPS = 0x0060
DR_1600SPS = 0x0080
DR_2400SPS = 0x00A0
DR_3300SPS = 0x00C0

# Config register: comparator
CMODE_MASK = 0x0010
CMODE_TRAD = 0x0000
CMODE_WINDOW = 0x0010

CPOL_MASK = 0x0008
CPOL_ACTVLOW = 0x0000
CPOL_ACTVHI = 0x0008

CLAT_MASK = 0x0004
CLAT_NONLAT = 0x0000
CLAT_LATCH = 0x0004

CQUE_MASK = 0x0003
CQUE_1CONV = 0x0000
CQUE_2CONV = 0x0001
CQUE_4CONV = 0x0002
CQUE_NONE = 0x0003

SINGLE_ENDED_MUX = (MUX_SINGLE_0, MUX_SINGLE_1, MUX_SINGLE_2, MUX_SINGLE_3)
DIFFERENTIAL_MUX = (MUX_DIFF_0_1, MUX_DIFF_0_3, MUX_DIFF_1_3, MUX_DIFF_2_3)


class Gain(IntEnum):
    """Amplifier gain, valued as the PGA bits of the config register."""

    TWOTHIRDS = PGA_6_144V
    ONE = PGA_4_096V
    TWO = PGA_2_048V
    FOUR = PGA_1_024V
    EIGHT = PGA_0_512V
    SIXTEEN = PGA_0_256V

    @property
    def full_scale(self) -> float:
        """The +/- input range in volts for this gain."""
        return _FULL_SCALE[self]


_FULL_SCALE = {
    Gain.TWOTHIRDS: 6.144,
    Gain.ONE: 4.096,
    Gain.TWO: 2.048,
    Gain.FOUR: 1.024,
    Gain.EIGHT: 0.512,
    Gain.SIXTEEN: 0.256,
}


def _gain_bits(gain) -> int:
    try:
        return int(Gain(gain))
    except ValueError:
        raise ValueError(f"invalid gain: {gain!r}") from None


def _single_mux(channel: int) -> int:
    if not 0 <= channel < len(SINGLE_ENDED_MUX):
        raise ValueError(f"channel must be 0..3, got {channel}")
    return SINGLE_ENDED_MUX[channel]


def single_ended_config(channel: int, gain) -> int:
    """Config word that starts a single-shot conversion on one input."""
    config = (
        CQUE_1CONV
        | CLAT_LATCH
        | CPOL_ACTVLOW
        | CMODE_WINDOW
        | DR_490SPS
        | MODE_SINGLE
    )
    config |= _gain_bits(gain)
    config |= _single_mux(channel)
    return config | OS_SINGLE


def differential_config(mux: int, gain) -> int:
    """Config word that starts a single-shot differential conversion."""
    if mux not in DIFFERENTIAL_MUX:
        raise ValueError(f"not a differential multiplexer setting: {mux:#06x}")
    config = (
        CQUE_NONE
        | CLAT_NONLAT
        | CPOL_ACTVLOW
        | CMODE_TRAD
        | DR_1600SPS
        | MODE_SINGLE
    )
    config |= _gain_bits(gain)
    config |= mux
    return config | OS_SINGLE


def comparator_config(channel: int, gain) -> int:
    """Config word for continuous conversion with the comparator enabled."""
    config = (
        CQUE_1CONV
        | CLAT_LATCH
        | CPOL_ACTVLOW
        | CMODE_TRAD
        | DR_490SPS
        | MODE_CONTIN
    )
    config |= _gain_bits(gain)
    return config | _single_mux(channel)