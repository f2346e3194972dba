# emgpong

A small Pong game played in the terminal and steered by numbers arriving
over UDP, together with the pieces for producing those numbers from a
signal: configuration and reading of an ADS1015/ADS1115 converter, a
Butterworth high-pass filter with a time-smoothed power measure, and UDP
senders and receivers.

## Installing

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Commands

### `emgpong`

Runs the game in the terminal. The player's paddle (`=`) is at the top,
the computer's paddle (`#`) at the bottom, and the ball is `o`. When the
ball hits the bottom wall the score goes up by one; when it hits the top
wall it goes down by one.

The game listens for text values on UDP (by default `127.0.0.1:1112`). A
negative value starts the paddle moving left, a positive value starts it
moving right; a further value while the paddle is moving stops it. Zero
does nothing.

Options:

- `--host`, `--port`: address to listen on.
- `--no-udp`: do not listen at all.
- `--ticks N`: stop after N frames (default: run until interrupted).
- `--interval SECONDS`: time between frames (default 0.012).
- `--demo-events`: feed a slow sine wave of signal events to the paddle
  before starting.
- `--quiet`: do not draw the field, only print the final score.

### `emgpong-send`

Sends test values to a receiver (default `127.0.0.1:1112`, sending from
`127.0.0.1:1117`).

- `--mode alternate` (default): 20 with its sign flipped each time,
  10,000,000 values unless `--count` is given.
- `--mode count`: counts up by one from `--start`, 500 values by default.
- `--mode channels`: sends four-channel binary frames of
  `1.1 2.3 9.5 0.2`, 10,000 by default.
- `--host`, `--port`, `--bind-host`, `--bind-port`, `--start`, `--count`.

### `emgpong-receive`

Binds a UDP port and prints each value it receives as `data: <value>`.
With `--channels` it decodes four-channel frames instead of text.
`--count N` stops after N items; `--host` and `--port` choose the address.

## Library

- `emgpong.registers`: the converter's register map, the `Gain` enum (with
  `full_scale` in volts), and `single_ended_config`, `differential_config`
  and `comparator_config`, which build configuration words and raise
  `ValueError` for a bad channel, multiplexer setting or gain.
- `emgpong.ads1115`: `ADS1015` (12-bit, results shifted by four) and
  `ADS1115` (16-bit) drivers working through a register bus. `I2CBus`
  talks to a Linux `/dev/i2c-N` device; `MemoryBus` is an in-memory
  register file that records writes, for use without hardware. Reading a
  single-ended channel above 3 returns 0.
- `emgpong.processing`: `HighPassFilter` (Butterworth, sample by sample),
  `SignalProcessor`, which filters each sample, squares it into power and
  keeps a moving sum of that power over a window (defaults: 860 Hz, 50 Hz
  cutoff, order 40, window of 100), returning a `ProcessedSample`;
  `SampleLogger`, which writes the raw, filtered and power values to
  `origin.dat`, `flhp1ed.dat` and `flpowertimesmooth.dat`;
  `synthetic_input`, a generated sum of sines; and `read_channel_files`,
  which reads two files of numbers in step (up to 30,000 lines, with lines
  that do not parse read as 0.0).
- `emgpong.udp`: `encode_value` / `decode_value` for single-precision
  values as text, `encode_channels` / `decode_channels` for four
  little-endian floats, `UdpSender`, `UdpReceiver` (a text datagram that
  does not parse is received as 0.0; a frame that is too short is
  dropped), and the value generators `alternating_values` and
  `counting_values`.
- `emgpong.pong`: the game model, `PongGame`, with `Rect`, `Key`,
  `SignalEvent` and `sine_events`.
- `emgpong.app`: `run_game` advances a game, applying pending UDP values
  first, and `render` draws it as text.

A minimal example:

```python
from emgpong.processing import SignalProcessor, synthetic_input

processor = SignalProcessor(sampling_rate=860, cutoff=50, order=40, window_size=100)
for value in synthetic_input(200, 2.0):
    sample = processor.process(value)
print(sample.smoothed_power)
```

## What it does not do

- There is no graphical window and no live plot of the signal; the game
  is drawn as text and the processed values are only available through
  the library or the data files written by `SampleLogger`.
- No command reads the converter, filters the samples and sends the
  result over UDP. The parts are here (`ADS1115`, `SignalProcessor`,
  `UdpSender`), but joining them is left to the user.
- Sampling is not driven by the converter's ready pin; reads happen when
  the caller asks for them.