"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod
from typing import Callable


class ContentProvider(ABC):
    """Source of words, illustrations, speech and pronunciation verdicts.

    Every method raises ServiceError when the request fails or the
    response cannot be used.
    """

    @abstractmethod
    def fetch_word(self, excluded_words: list) -> 'WordChallenge':
        """Get a new word that is not in excluded_words."""
        pass

    @abstractmethod
    def fetch_illustration(self, prompt: str) -> 'ImageAsset':
        """Generate an illustration for the prompt."""
        pass

    @abstractmethod
    def fetch_speech(self, word: str) -> bytes:
        """Synthesize the word as speech. Returns the encoded audio payload."""
        pass

    @abstractmethod
    def fetch_verdict(self, target_word: str, audio: bytes, encoding: str) -> bool:
        """Judge whether the recording pronounces target_word correctly."""
        pass


class AIProvider(ABC):
    """Abstract base class for the generative AI backend used by the proxy."""

    @abstractmethod
    def generate_word(self, excluded_words: list) -> dict:
        """Generate a word. Returns {cleanWord, syllables, imagePrompt}."""
        pass

    @abstractmethod
    def generate_image(self, prompt: str) -> 'ImageAsset | None':
        """Generate an illustration. Returns None if no image came back."""
        pass

    @abstractmethod
    def synthesize_speech(self, text: str) -> bytes | None:
        """Synthesize speech. Returns None if no audio came back."""
        pass

    @abstractmethod
    def evaluate_pronunciation(self, target_word: str, audio: bytes, mime_type: str) -> bool | None:
        """Judge a recording. Returns None if the model gave no answer."""
        pass


class KeyValueStorage(ABC):
    """Abstract base class for small persistent client-side values."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value."""
        pass


class CaptureDevice(ABC):
    """Platform microphone capability."""

    @abstractmethod
    def supports(self, encoding: str) -> bool:
        """Whether the device can record in the given encoding."""
        pass

    @abstractmethod
    def acquire(self):
        """Get access to the microphone. Returns an opaque handle.

        Raises PermissionDenied or DeviceUnavailable.
        """
        pass

    @abstractmethod
    def start(self, handle, encoding: str, on_data: Callable[[bytes], None]) -> None:
        """Start recording; on_data receives chunks as they arrive."""
        pass

    @abstractmethod
    def finish(self, handle, buffer: bytearray, encoding: str) -> bytes:
        """Stop producing data, then return buffer finalized as encoding."""
        pass

    @abstractmethod
    def release(self, handle) -> None:
        """Give the microphone back. Must be safe to call after a failure."""
        pass


class PlaybackDevice(ABC):
    """Platform audio output capability."""

    @abstractmethod
    def play(self, samples, sample_rate: int) -> None:
        """Play mono float32 samples in [-1, 1)."""
        pass
