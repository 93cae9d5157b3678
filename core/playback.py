"""Speech playback and feedback cue sounds."""

import io
import logging
from enum import Enum

import numpy as np
import soundfile as sf

from .config import PCM_SAMPLE_RATE
from .interfaces import PlaybackDevice

logger = logging.getLogger(__name__)


class DecodeStrategy(Enum):
    CONTAINER = 'container'
    RAW_PCM = 'raw_pcm'
    NONE = 'none'


class DecodedAudio:
    """Result of decoding a speech payload."""

    def __init__(self, strategy: DecodeStrategy, samples=None, sample_rate: int = 0):
        self.strategy = strategy
        self.samples = samples
        self.sample_rate = sample_rate

    @property
    def ok(self) -> bool:
        return self.strategy is not DecodeStrategy.NONE

    @property
    def duration(self) -> float:
        if not self.ok or not self.sample_rate:
            return 0.0
        return len(self.samples) / self.sample_rate


def decode_container(payload: bytes) -> DecodedAudio:
    """Decode a self-describing audio file (WAV, FLAC, OGG...)."""
    try:
        samples, sample_rate = sf.read(io.BytesIO(payload), dtype='float32', always_2d=True)
    except (RuntimeError, TypeError, ValueError) as e:
        logger.debug(f"Container decode failed: {e}")
        return DecodedAudio(DecodeStrategy.NONE)
    if len(samples) == 0:
        return DecodedAudio(DecodeStrategy.NONE)
    return DecodedAudio(DecodeStrategy.CONTAINER, samples.mean(axis=1).astype(np.float32), sample_rate)


def decode_raw_pcm(payload: bytes, sample_rate: int = PCM_SAMPLE_RATE) -> DecodedAudio:
    """Interpret payload as headerless 16-bit little-endian mono PCM."""
    usable = len(payload) - len(payload) % 2
    if usable == 0:
        return DecodedAudio(DecodeStrategy.NONE)
    pcm = np.frombuffer(payload[:usable], dtype='<i2')
    return DecodedAudio(DecodeStrategy.RAW_PCM, pcm.astype(np.float32) / 32768.0, sample_rate)


def decode(payload: bytes, sample_rate: int = PCM_SAMPLE_RATE) -> DecodedAudio:
    """Try container decoding first, then raw PCM."""
    if not payload:
        return DecodedAudio(DecodeStrategy.NONE)
    result = decode_container(payload)
    if result.ok:
        return result
    return decode_raw_pcm(payload, sample_rate)


def _exponential_decay(n: int, floor: float = 0.01) -> np.ndarray:
    """Gain envelope going from 1.0 to floor over n samples."""
    return floor ** (np.arange(n) / n)


def _phase(frequencies: np.ndarray, sample_rate: int) -> np.ndarray:
    return 2 * np.pi * np.cumsum(frequencies) / sample_rate


def success_chime(sample_rate: int = PCM_SAMPLE_RATE) -> np.ndarray:
    """Two rising sine notes, C5 then E5."""
    n = int(0.5 * sample_rate)
    t = np.arange(n) / sample_rate
    freqs = np.where(t < 0.1, 523.25, 659.25)
    wave = np.sin(_phase(freqs, sample_rate))
    return (wave * _exponential_decay(n)).astype(np.float32)


def failure_tone(sample_rate: int = PCM_SAMPLE_RATE) -> np.ndarray:
    """Low descending triangle wave."""
    n = int(0.4 * sample_rate)
    t = np.arange(n) / sample_rate
    freqs = np.interp(t, [0.0, 0.15, 0.3], [150.0, 100.0, 80.0])
    phase = _phase(freqs, sample_rate) / (2 * np.pi)
    wave = 2 * np.abs(2 * (phase - np.floor(phase + 0.5))) - 1
    return (wave * _exponential_decay(n)).astype(np.float32)


CUES = {
    'success': success_chime,
    'failure': failure_tone,
}


class AudioPlaybackAdapter:
    """Plays synthesized speech and cue sounds. Never raises on playback problems."""

    def __init__(self, device: PlaybackDevice, sample_rate: int = PCM_SAMPLE_RATE):
        self.device = device
        self.sample_rate = sample_rate

    def play(self, payload: bytes) -> bool:
        result = decode(payload, self.sample_rate)
        if not result.ok:
            logger.error(f"Could not decode speech audio ({len(payload or b'')} bytes)")
            return False
        logger.debug(f"Playing speech: {result.strategy.value}, {result.duration:.2f}s")
        return self._play(result.samples, result.sample_rate)

    def play_cue(self, kind: str) -> bool:
        """Play the 'success' or 'failure' cue."""
        generator = CUES.get(kind)
        if generator is None:
            logger.warning(f"Unknown cue sound: {kind}")
            return False
        return self._play(generator(self.sample_rate), self.sample_rate)

    def _play(self, samples, sample_rate: int) -> bool:
        try:
            self.device.play(samples, sample_rate)
            return True
        except Exception as e:
            logger.error(f"Audio playback error: {e}")
            return False
