"""Loading 16-bit WAVE samples and mixing them into blocks of PCM audio."""

from __future__ import annotations

import os
import struct
from collections.abc import Callable
from dataclasses import dataclass

_MAX_SHORT = 0x7FFF
_REQUIRED_BITS = 16
_REQUIRED_RATE = 44100
_CHUNK = struct.Struct("<4sI")
_FORMAT = struct.Struct("<HHIIHH")
# Guards the sample-position step against a product such as 44100 * (1/44100)
# landing a hair below 1.0 and truncating to zero.
_STEP_EPSILON = 1e-9

SoundGenerator = Callable[[int, float, float], float]
SoundFilter = Callable[[int, float, float], float]


class WavError(ValueError):
    """Raised when a WAVE file is malformed or in an unsupported format."""


@dataclass
class AudioSample:
    """Interleaved audio normalised to the range -1.0..1.0."""

    samples: list[float]
    channels: int = 1
    sample_rate: int = _REQUIRED_RATE

    @property
    def frames(self) -> int:
        """Number of sample frames (one value per channel each)."""
        return len(self.samples) // self.channels if self.channels else 0


def _parse_wav(data: bytes) -> AudioSample:
    if len(data) < 12 or data[0:4] != b"RIFF":
        raise WavError("not a RIFF file")
    if data[8:12] != b"WAVE":
        raise WavError("not a WAVE file")

    offset = 12
    if len(data) < offset + _CHUNK.size:
        raise WavError("missing format chunk")
    chunk_id, fmt_size = _CHUNK.unpack_from(data, offset)
    if chunk_id != b"fmt ":
        raise WavError(f"expected format chunk, found {chunk_id!r}")
    offset += _CHUNK.size
    if fmt_size < _FORMAT.size or len(data) < offset + _FORMAT.size:
        raise WavError("format chunk too short")
    _tag, channels, rate, _avg, _align, bits = _FORMAT.unpack_from(data, offset)
    offset += fmt_size

    if bits != _REQUIRED_BITS or rate != _REQUIRED_RATE:
        raise WavError(
            f"only {_REQUIRED_BITS}-bit audio at {_REQUIRED_RATE} Hz is supported, "
            f"got {bits}-bit at {rate} Hz"
        )
    if channels == 0:
        raise WavError("format declares no channels")

    while True:
        if len(data) < offset + _CHUNK.size:
            raise WavError("no data chunk found")
        chunk_id, size = _CHUNK.unpack_from(data, offset)
        offset += _CHUNK.size
        if chunk_id == b"data":
            break
        offset += size

    frames = size // (channels * (bits >> 3))
    count = frames * channels
    if len(data) < offset + 2 * count:
        raise WavError("data chunk truncated")
    values = struct.unpack_from(f"<{count}h", data, offset)
    return AudioSample([v / _MAX_SHORT for v in values], channels, rate)


def load_wav(path: str | os.PathLike[str]) -> AudioSample:
    """Load a 16-bit, 44100 Hz WAVE file."""
    with open(path, "rb") as handle:
        return _parse_wav(handle.read())


@dataclass
class _Voice:
    sample_id: int
    position: int = 0
    finished: bool = False
    loop: bool = False


def _clip(sample: float, limit: float) -> float:
    return min(sample, limit) if sample >= 0.0 else max(sample, -limit)


class Mixer:
    """Mixes any number of playing samples, plus generated sound, per channel.

    ``generator`` may be set to a callable ``(channel, global_time, time_step)``
    that produces sound to add to the mix, and ``sound_filter`` to a callable
    ``(channel, global_time, sample)`` that alters the mixed value. Subclasses
    may instead override ``on_sound_sample`` and ``on_sound_filter``.
    """

    def __init__(self, sample_rate: int = _REQUIRED_RATE, channels: int = 1) -> None:
        if sample_rate <= 0 or channels <= 0:
            raise ValueError("sample rate and channel count must be positive")
        self.sample_rate = sample_rate
        self.channels = channels
        self.global_time = 0.0
        self.generator: SoundGenerator | None = None
        self.sound_filter: SoundFilter | None = None
        self._samples: list[AudioSample] = []
        self._voices: list[_Voice] = []

    def __repr__(self) -> str:
        return (
            f"Mixer(sample_rate={self.sample_rate}, channels={self.channels}, "
            f"global_time={self.global_time})"
        )

    @property
    def playing(self) -> tuple[int, ...]:
        """Ids of the samples currently playing, in the order they were started."""
        return tuple(voice.sample_id for voice in self._voices)

    def load_sample(self, path: str | os.PathLike[str]) -> int:
        """Load a WAVE file and return its sample id."""
        return self.add_sample(load_wav(path))

    def add_sample(self, sample: AudioSample) -> int:
        """Register a sample and return its id, counting from 1."""
        self._samples.append(sample)
        return len(self._samples)

    def play(self, sample_id: int, loop: bool = False) -> None:
        """Start playing a registered sample."""
        if not 1 <= sample_id <= len(self._samples):
            raise ValueError(f"unknown sample id {sample_id}")
        self._voices.append(_Voice(sample_id, loop=loop))

    def stop(self, sample_id: int) -> None:
        """Stop every playing instance of a sample."""
        self._voices = [v for v in self._voices if v.sample_id != sample_id]

    def on_sound_sample(self, channel: int, global_time: float, time_step: float) -> float:
        """Generated sound to add to the mix; silence when no generator is set."""
        if self.generator is None:
            return 0.0
        return float(self.generator(channel, global_time, time_step))

    def on_sound_filter(self, channel: int, global_time: float, sample: float) -> float:
        """Last chance to alter the mixed value; unchanged when no filter is set."""
        if self.sound_filter is None:
            return sample
        return float(self.sound_filter(channel, global_time, sample))

    def output(self, channel: int, global_time: float, time_step: float) -> float:
        """Advance every playing sample and return the mixed value for a channel."""
        mixed = 0.0
        for voice in self._voices:
            sample = self._samples[voice.sample_id - 1]
            voice.position += int(sample.sample_rate * time_step + _STEP_EPSILON)
            if voice.position < sample.frames:
                mixed += sample.samples[voice.position * sample.channels + channel]
            else:
                voice.finished = True
        self._voices = [v for v in self._voices if not v.finished]
        mixed += self.on_sound_sample(channel, global_time, time_step)
        return self.on_sound_filter(channel, global_time, mixed)

    def render_block(self, block_samples: int) -> list[int]:
        """Produce one block of signed 16-bit values, interleaved by channel."""
        time_step = 1.0 / self.sample_rate
        block: list[int] = []
        for _ in range(0, block_samples, self.channels):
            for channel in range(self.channels):
                value = _clip(self.output(channel, self.global_time, time_step), 1.0)
                block.append(int(value * _MAX_SHORT))
            self.global_time += time_step
        return block