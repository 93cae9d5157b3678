"""Domain models for chytanka application."""

import base64
import binascii
from enum import Enum


class GameState(Enum):
    INITIAL = 'INITIAL'
    LOADING = 'LOADING'
    READY = 'READY'
    RECORDING = 'RECORDING'
    EVALUATING = 'EVALUATING'
    SUCCESS = 'SUCCESS'
    FAILURE = 'FAILURE'
    ERROR = 'ERROR'


class Verdict(Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'
    UNAVAILABLE = 'unavailable'  # Verdict request failed, attempt not counted


class WordChallenge:
    """A word or short phrase to read, split into syllables."""

    __slots__ = ('_display_form', '_normalized_word', '_illustration_prompt')

    def __init__(self, display_form, normalized_word: str, illustration_prompt: str):
        self._display_form = tuple(display_form)
        self._normalized_word = normalized_word
        self._illustration_prompt = illustration_prompt

    @property
    def display_form(self) -> tuple:
        """Syllable groups, one per displayed line (e.g. ('Ми-ла', 'кіш-ка'))."""
        return self._display_form

    @property
    def normalized_word(self) -> str:
        return self._normalized_word

    @property
    def illustration_prompt(self) -> str:
        return self._illustration_prompt

    def __eq__(self, other):
        if not isinstance(other, WordChallenge):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self._display_form, self._normalized_word, self._illustration_prompt))

    def __repr__(self):
        return f"WordChallenge({self._normalized_word!r}, syllables={' '.join(self._display_form)!r})"

    def to_dict(self) -> dict:
        return {
            'cleanWord': self._normalized_word,
            'syllables': ' '.join(self._display_form),
            'imagePrompt': self._illustration_prompt
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordChallenge':
        """Build from the proxy payload. Raises ValueError on unusable data."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        word = data.get('cleanWord')
        syllables = data.get('syllables')
        prompt = data.get('imagePrompt')

        if not isinstance(word, str) or not word.strip():
            raise ValueError("Missing 'cleanWord'")
        if isinstance(syllables, str):
            groups = syllables.split()
        elif isinstance(syllables, (list, tuple)):
            groups = [str(s).strip() for s in syllables if str(s).strip()]
        else:
            groups = []
        if not groups:
            raise ValueError("Missing 'syllables'")
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("Missing 'imagePrompt'")

        return cls(groups, word.strip(), prompt.strip())


class RecencyRecord:
    """A word shown to the player and when it was shown."""

    def __init__(self, word: str, seen_at_ms: int):
        self.word = word
        self.seen_at_ms = seen_at_ms

    def to_dict(self) -> dict:
        return {'word': self.word, 'timestamp': self.seen_at_ms}

    @classmethod
    def from_dict(cls, data: dict) -> 'RecencyRecord':
        word = data['word']
        timestamp = data['timestamp']
        if not isinstance(word, str) or isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError(f"Malformed history record: {data!r}")
        return cls(word, int(timestamp))

    def is_expired(self, now_ms: int, window_ms: int) -> bool:
        return now_ms - self.seen_at_ms >= window_ms


class ImageAsset:
    """An illustration as raw bytes plus its MIME type."""

    def __init__(self, mime_type: str, data: bytes):
        self.mime_type = mime_type
        self.data = data

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode('ascii')
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, url: str) -> 'ImageAsset':
        """Parse a 'data:<mime>;base64,<payload>' URL. Raises ValueError."""
        if not isinstance(url, str) or not url.startswith('data:') or ',' not in url:
            raise ValueError("Not a data URL")
        header, payload = url[5:].split(',', 1)
        if not header.endswith(';base64'):
            raise ValueError("Only base64 data URLs are supported")
        mime_type = header[:-len(';base64')] or 'application/octet-stream'
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
        return cls(mime_type, data)

    @property
    def extension(self) -> str:
        subtype = self.mime_type.split('/')[-1].split(';')[0]
        return 'jpg' if subtype == 'jpeg' else subtype


class CapturedAudio:
    """A finished recording and the encoding it was made with."""

    def __init__(self, data: bytes, encoding: str):
        self.data = data
        self.encoding = encoding

    def __len__(self):
        return len(self.data)


class RoundSession:
    """Transient state of one round. Replaced wholesale when a new round starts."""

    def __init__(self, round_id: int, challenge: WordChallenge):
        self.round_id = round_id
        self.challenge = challenge
        self.attempt_count = 0
        self.illustration = None  # ImageAsset, arrives in the background
        self.speech = None        # bytes, arrives in the background
        self.media_loading = False
