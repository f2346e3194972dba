"""UDP transport of control values: text floats and four-channel binary frames."""

from __future__ import annotations

import argparse
import logging
import re
import socket
import struct
import sys
from typing import Iterable, Iterator

log = logging.getLogger(__name__)

LOCALHOST = "127.0.0.1"
SENDER_PORT = 1117
RECEIVER_PORT = 1112
CHANNELS = 4
MAX_DATAGRAM = 65535

_FRAME = struct.Struct(f"<{CHANNELS}f")
_NUMBER = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
DEMO_CHANNELS = (1.1, 2.3, 9.5, 0.2)


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        raise ValueError(f"{value!r} is out of single-precision range") from None


def encode_value(value: float) -> bytes:
    """Encode a single-precision value as its short decimal text."""
    return f"{_to_float32(value):g}".encode("ascii")


def decode_value(data: bytes) -> float:
    """Parse decimal text into a single-precision value; raise ValueError if invalid."""
    try:
        text = bytes(data).decode("ascii").strip()
    except UnicodeDecodeError:
        raise ValueError("datagram is not ASCII text") from None
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"not a number: {text!r}")
    return _to_float32(float(text))


def encode_channels(values: Iterable[float]) -> bytes:
    """Pack exactly four channel values as little-endian single-precision floats."""
    values = tuple(values)
    if len(values) != CHANNELS:
        raise ValueError(f"expected {CHANNELS} channel values, got {len(values)}")
    try:
        return _FRAME.pack(*values)
    except (OverflowError, struct.error) as exc:
        raise ValueError(str(exc)) from None


def decode_channels(data: bytes) -> tuple[float, ...]:
    """Unpack four channel values; extra bytes are ignored as a truncated read would."""
    if len(data) < _FRAME.size:
        raise ValueError(f"frame needs {_FRAME.size} bytes, got {len(data)}")
    return _FRAME.unpack_from(data)


class UdpSender:
    """A socket that sends values to one receiver."""

    def __init__(
        self,
        host: str = LOCALHOST,
        port: int = RECEIVER_PORT,
        bind_host: str | None = LOCALHOST,
        bind_port: int = SENDER_PORT,
    ):
        self._target = (host, port)
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        if bind_host is not None:
            try:
                self._socket.bind((bind_host, bind_port))
            except OSError as exc:
                log.warning("sender bind to %s:%d failed: %s", bind_host, bind_port, exc)

    def send_value(self, value: float) -> bytes:
        """Send one value as text; return the payload sent."""
        payload = encode_value(value)
        self._socket.sendto(payload, self._target)
        return payload

    def send_channels(self, values: Iterable[float]) -> bytes:
        """Send four channel values as a binary frame; return the payload sent."""
        payload = encode_channels(values)
        self._socket.sendto(payload, self._target)
        return payload

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> UdpSender:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class UdpReceiver:
    """A bound socket that collects pending datagrams."""

    def __init__(self, host: str = LOCALHOST, port: int = RECEIVER_PORT):
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._socket.bind((host, port))
        except OSError:
            self._socket.close()
            raise

    def address(self) -> tuple[str, int]:
        """The (host, port) the receiver is bound to."""
        host, port = self._socket.getsockname()[:2]
        return host, port

    def _pending(self, timeout: float | None) -> list[bytes]:
        """Wait up to timeout for a datagram, then drain whatever else is queued."""
        self._socket.settimeout(timeout)
        try:
            first, _ = self._socket.recvfrom(MAX_DATAGRAM)
        except (socket.timeout, BlockingIOError):
            return []
        datagrams = [first]
        self._socket.setblocking(False)
        try:
            while True:
                try:
                    data, _ = self._socket.recvfrom(MAX_DATAGRAM)
                except BlockingIOError:
                    break
                datagrams.append(data)
        finally:
            self._socket.setblocking(True)
        return datagrams

    def receive_values(self, timeout: float | None = None) -> list[float]:
        """Decode pending text datagrams; one that does not parse counts as 0.0."""
        values = []
        for data in self._pending(timeout):
            try:
                values.append(decode_value(data))
            except ValueError as exc:
                log.warning("received but data conversion failed: %s", exc)
                values.append(0.0)
        return values

    def receive_channels(self, timeout: float | None = None) -> list[tuple[float, ...]]:
        """Decode pending four-channel frames; frames that are too short are dropped."""
        frames = []
        for data in self._pending(timeout):
            try:
                frames.append(decode_channels(data))
            except ValueError as exc:
                log.warning("dropping frame: %s", exc)
        return frames

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> UdpReceiver:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def alternating_values(start: float = 20.0, count: int = 10_000_000) -> Iterator[float]:
    """Yield start with its sign flipped before each value."""
    value = _to_float32(start)
    for _ in range(count):
        value = _to_float32(value * -1.0)
        yield value


def counting_values(start: float = 20.0, count: int = 500) -> Iterator[float]:
    """Yield start increased by one before each value."""
    value = _to_float32(start)
    for _ in range(count):
        value = _to_float32(value + 1.0)
        yield value


def send_main(argv: list[str] | None = None) -> int:
    """Send a test stream of values to a receiver."""
    parser = argparse.ArgumentParser(description="Send test values over UDP.")
    parser.add_argument(
        "--mode", choices=("alternate", "count", "channels"), default="alternate"
    )
    parser.add_argument("--host", default=LOCALHOST)
    parser.add_argument("--port", type=int, default=RECEIVER_PORT)
    parser.add_argument("--bind-host", default=LOCALHOST)
    parser.add_argument("--bind-port", type=int, default=SENDER_PORT)
    parser.add_argument("--start", type=float, default=20.0)
    parser.add_argument("--count", type=int)
    args = parser.parse_args(argv)

    with UdpSender(args.host, args.port, args.bind_host, args.bind_port) as sender:
        try:
            if args.mode == "channels":
                count = 10_000 if args.count is None else args.count
                for _ in range(count):
                    print("--- Sending")
                    sender.send_channels(DEMO_CHANNELS)
                    print(" ".join(f"{v:g}" for v in DEMO_CHANNELS))
                    print("successfully send")
            else:
                if args.mode == "alternate":
                    count = 10_000_000 if args.count is None else args.count
                    values = alternating_values(args.start, count)
                else:
                    count = 500 if args.count is None else args.count
                    values = counting_values(args.start, count)
                for value in values:
                    print("--- Sending")
                    payload = sender.send_value(value)
                    print(f"data: {payload.decode('ascii')}")
                    print("successfully send")
        except OSError as exc:
            print(f"sending is failed: {exc}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            pass
    return 0


def receive_main(argv: list[str] | None = None) -> int:
    """Receive and print values until interrupted or a count is reached."""
    parser = argparse.ArgumentParser(description="Receive test values over UDP.")
    parser.add_argument("--host", default=LOCALHOST)
    parser.add_argument("--port", type=int, default=RECEIVER_PORT)
    parser.add_argument("--channels", action="store_true")
    parser.add_argument("--count", type=int)
    args = parser.parse_args(argv)

    try:
        receiver = UdpReceiver(args.host, args.port)
    except OSError as exc:
        print(f"bind failed: {exc}", file=sys.stderr)
        return 1
    print("bind success")
    print("--- receiving--", flush=True)
    received = 0
    with receiver:
        try:
            while args.count is None or received < args.count:
                if args.channels:
                    items = [
                        " ".join(f"{v:g}" for v in frame)
                        for frame in receiver.receive_channels()
                    ]
                else:
                    items = [f"{v:g}" for v in receiver.receive_values()]
                for item in items:
                    print(f"data: {item}", flush=True)
                received += len(items)
        except KeyboardInterrupt:
            pass
    return 0