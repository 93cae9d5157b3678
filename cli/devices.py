"""Microphone and speaker devices backed by sounddevice."""

import io
import logging

import numpy as np
import sounddevice as sd
import soundfile as sf

from core.config import CAPTURE_SAMPLE_RATE
from core.errors import DeviceUnavailable, PermissionDenied
from core.interfaces import CaptureDevice, PlaybackDevice

logger = logging.getLogger(__name__)

CHANNELS = 1


class _Recording:
    """Open input stream plus the sink its callback writes to."""

    def __init__(self):
        self.stream = None
        self.on_data = None

    def callback(self, indata, frames, time, status):
        if status:
            logger.warning(f"Audio status: {status}")
        if self.on_data is not None:
            self.on_data(bytes(indata))


class SoundDeviceCapture(CaptureDevice):
    """Records 16-bit mono PCM from the default input and delivers WAV."""

    SUPPORTED = ('audio/wav',)

    def __init__(self, sample_rate: int = CAPTURE_SAMPLE_RATE):
        self.sample_rate = sample_rate

    def supports(self, encoding: str) -> bool:
        return encoding in self.SUPPORTED

    def acquire(self) -> _Recording:
        try:
            devices = sd.query_devices()
        except sd.PortAudioError as e:
            raise DeviceUnavailable(f"Audio device error: {e}") from e
        input_devices = [d for d in devices if d['max_input_channels'] > 0]
        if not input_devices:
            raise DeviceUnavailable("No microphone found. Check system privacy settings for microphone access")

        recording = _Recording()
        try:
            recording.stream = sd.RawInputStream(
                samplerate=self.sample_rate, channels=CHANNELS, dtype='int16',
                callback=recording.callback
            )
        except sd.PortAudioError as e:
            message = str(e).lower()
            if 'permission' in message or 'not authorized' in message:
                raise PermissionDenied(f"Microphone access denied: {e}") from e
            raise DeviceUnavailable(f"Cannot open microphone: {e}") from e
        return recording

    def start(self, handle: _Recording, encoding: str, on_data) -> None:
        handle.on_data = on_data
        handle.stream.start()

    def finish(self, handle: _Recording, buffer: bytearray, encoding: str) -> bytes:
        handle.stream.stop()
        handle.on_data = None
        data = bytes(buffer)
        samples = np.frombuffer(data[:len(data) - len(data) % 2], dtype='<i2')
        buffer = io.BytesIO()
        sf.write(buffer, samples, self.sample_rate, format='WAV', subtype='PCM_16')
        duration = len(samples) / self.sample_rate
        logger.info(f"Recording complete ({duration:.1f}s)")
        return buffer.getvalue()

    def release(self, handle: _Recording) -> None:
        handle.on_data = None
        if handle.stream is not None:
            handle.stream.close()


class SoundDevicePlayback(PlaybackDevice):
    """Plays samples on the default output without blocking the caller."""

    def play(self, samples, sample_rate: int) -> None:
        sd.play(samples, sample_rate)
