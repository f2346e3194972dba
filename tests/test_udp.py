import socket
import threading
import time

import pytest

from emgpong.udp import (
    UdpReceiver,
    UdpSender,
    alternating_values,
    counting_values,
    decode_channels,
    decode_value,
    encode_channels,
    encode_value,
    receive_main,
    send_main,
)


def _collect(receive, expected, deadline=3.0):
    items = []
    end = time.monotonic() + deadline
    while len(items) < expected and time.monotonic() < end:
        items.extend(receive(timeout=0.2))
    return items


@pytest.fixture
def receiver():
    with UdpReceiver("127.0.0.1", 0) as rx:
        yield rx


def test_encode_value_uses_short_text():
    assert encode_value(21.0) == b"21"
    assert encode_value(-20.0) == b"-20"


@pytest.mark.parametrize("value", [21.0, -20.0, 0.5, 123.25, -0.125])
def test_value_round_trip(value):
    assert decode_value(encode_value(value)) == value


def test_decode_ignores_surrounding_whitespace():
    assert decode_value(b"  22\n") == 22.0


@pytest.mark.parametrize("data", [b"", b"abc", b"1_0", b"1.2.3", b"\xff"])
def test_decode_rejects_garbage(data):
    with pytest.raises(ValueError):
        decode_value(data)


def test_decode_rejects_out_of_float_range():
    with pytest.raises(ValueError):
        decode_value(b"1e39")


def test_channels_round_trip():
    values = (1.1, 2.3, 9.5, 0.2)
    payload = encode_channels(values)
    assert len(payload) == 16
    assert decode_channels(payload) == pytest.approx(values, rel=1e-6)


def test_decode_channels_ignores_trailing_bytes():
    payload = encode_channels([1.0, 2.0, 3.0, 4.0])
    assert decode_channels(payload + b"extra") == (1.0, 2.0, 3.0, 4.0)


def test_encode_channels_needs_four():
    with pytest.raises(ValueError):
        encode_channels([1.0, 2.0, 3.0])


def test_decode_channels_short_frame():
    with pytest.raises(ValueError):
        decode_channels(b"\x00" * 8)


def test_alternating_values():
    assert list(alternating_values(20.0, 4)) == [-20.0, 20.0, -20.0, 20.0]


def test_counting_values():
    assert list(counting_values(20.0, 3)) == [21.0, 22.0, 23.0]


def test_receive_nothing_times_out(receiver):
    assert receiver.receive_values(timeout=0.05) == []


def test_send_and_receive_values(receiver):
    host, port = receiver.address()
    with UdpSender(host, port, "127.0.0.1", 0) as sender:
        assert sender.send_value(21.0) == b"21"
        sender.send_value(-20.0)
    assert _collect(receiver.receive_values, 2) == [21.0, -20.0]


def test_send_and_receive_channels(receiver):
    host, port = receiver.address()
    with UdpSender(host, port, "127.0.0.1", 0) as sender:
        sender.send_channels([1.0, 2.0, 3.0, 4.0])
    assert _collect(receiver.receive_channels, 1) == [(1.0, 2.0, 3.0, 4.0)]


def test_garbage_datagram_reads_as_zero(receiver):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as raw:
        raw.sendto(b"nonsense", receiver.address())
    assert _collect(receiver.receive_values, 1) == [0.0]


def test_short_frame_is_dropped(receiver):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as raw:
        raw.sendto(b"\x00\x00", receiver.address())
        raw.sendto(encode_channels([5.0, 6.0, 7.0, 8.0]), receiver.address())
    assert _collect(receiver.receive_channels, 1) == [(5.0, 6.0, 7.0, 8.0)]


def test_receiver_bind_conflict(receiver):
    host, port = receiver.address()
    with pytest.raises(OSError):
        UdpReceiver(host, port)


def test_send_main_counts(receiver):
    host, port = receiver.address()
    code = send_main(
        ["--mode", "count", "--host", host, "--port", str(port),
         "--bind-port", "0", "--count", "3"]
    )
    assert code == 0
    assert _collect(receiver.receive_values, 3) == [21.0, 22.0, 23.0]


def test_send_main_channels(receiver):
    host, port = receiver.address()
    code = send_main(
        ["--mode", "channels", "--host", host, "--port", str(port),
         "--bind-port", "0", "--count", "1"]
    )
    assert code == 0
    frames = _collect(receiver.receive_channels, 1)
    assert frames[0] == pytest.approx((1.1, 2.3, 9.5, 0.2), rel=1e-6)


def test_receive_main_prints_values(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
    results = []
    thread = threading.Thread(
        target=lambda: results.append(receive_main(["--port", str(port), "--count", "1"]))
    )
    thread.start()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as raw:
        end = time.monotonic() + 5.0
        while thread.is_alive() and time.monotonic() < end:
            raw.sendto(b"21", ("127.0.0.1", port))
            thread.join(0.05)
    thread.join(1.0)
    assert results == [0]
    assert "data: 21" in capsys.readouterr().out