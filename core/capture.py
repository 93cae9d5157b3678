"""Microphone recording lifecycle."""

import logging

from .config import PREFERRED_ENCODINGS, DEFAULT_ENCODING
from .errors import CaptureError, CaptureInProgress
from .interfaces import CaptureDevice
from .models import CapturedAudio

logger = logging.getLogger(__name__)


class CaptureSession:
    """One open recording: device handle, accumulated bytes and encoding."""

    def __init__(self, handle, encoding: str):
        self.handle = handle
        self.encoding = encoding
        self.buffer = bytearray()

    def append(self, chunk: bytes) -> None:
        self.buffer.extend(chunk)


class MediaCaptureSession:
    """Opens, finalizes and releases microphone recordings, one at a time.

    The device is released on every exit path: a normal stop, an abort,
    or a failure while opening or finalizing.
    """

    def __init__(self, device: CaptureDevice, preferred_encodings: list = None,
                 default_encoding: str = DEFAULT_ENCODING):
        self.device = device
        self.preferred_encodings = preferred_encodings or PREFERRED_ENCODINGS
        self.default_encoding = default_encoding
        self.session = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def negotiate_encoding(self) -> str:
        """First preferred encoding the device supports, else the default."""
        for encoding in self.preferred_encodings:
            if self.device.supports(encoding):
                return encoding
        logger.info(f"No preferred encoding supported, falling back to {self.default_encoding}")
        return self.default_encoding

    def open(self) -> CaptureSession:
        """Acquire the microphone and start recording.

        Raises CaptureInProgress if a session is already open, and
        PermissionDenied or DeviceUnavailable from the device.
        """
        if self.session is not None:
            raise CaptureInProgress("A recording is already in progress")

        handle = self.device.acquire()
        try:
            encoding = self.negotiate_encoding()
            session = CaptureSession(handle, encoding)
            self.device.start(handle, encoding, session.append)
        except CaptureError:
            self._release(handle)
            raise
        except Exception as e:
            self._release(handle)
            raise CaptureError(f"Could not start recording: {e}") from e

        self.session = session
        logger.debug(f"Recording started ({encoding})")
        return session

    def stop(self) -> CapturedAudio:
        """Finalize the recording, release the microphone and return the audio."""
        session = self.session
        if session is None:
            raise CaptureError("No recording in progress")

        self.session = None
        try:
            data = self.device.finish(session.handle, session.buffer, session.encoding)
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(f"Could not finalize recording: {e}") from e
        finally:
            self._release(session.handle)

        logger.debug(f"Recording finished: {len(data)} bytes ({session.encoding})")
        return CapturedAudio(data, session.encoding)

    def abort(self) -> None:
        """Drop the current recording, if any, and release the microphone."""
        session = self.session
        if session is None:
            return
        self.session = None
        self._release(session.handle)
        logger.debug("Recording aborted")

    def _release(self, handle) -> None:
        try:
            self.device.release(handle)
        except Exception as e:
            logger.error(f"Failed to release microphone: {e}")
