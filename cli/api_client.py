"""REST API client for chytanka server."""

import base64
import binascii

import requests

from core.config import DEFAULT_SERVER_URL, REQUEST_TIMEOUT
from core.errors import ServiceError
from core.interfaces import ContentProvider
from core.models import ImageAsset, WordChallenge


class ChytankaAPIClient(ContentProvider):
    """Content provider backed by the chytanka proxy server."""

    def __init__(self, base_url: str = DEFAULT_SERVER_URL, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def _post(self, endpoint: str, data: dict) -> dict:
        """Make a POST request. Raises ServiceError on any failure."""
        try:
            response = self.session.post(f"{self.base_url}{endpoint}", json=data, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as e:
            raise ServiceError(f"API {endpoint} failed: {e.response.status_code} {e.response.text}") from e
        except (requests.RequestException, ValueError) as e:
            raise ServiceError(f"API {endpoint} failed: {e}") from e
        if not isinstance(payload, dict):
            raise ServiceError(f"API {endpoint} returned {type(payload).__name__}, expected an object")
        return payload

    def health_check(self) -> dict:
        """Check if the server is running."""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ServiceError(f"Server not reachable at {self.base_url}: {e}") from e

    def fetch_word(self, excluded_words: list) -> WordChallenge:
        data = self._post("/api/word", {'excludedWords': list(excluded_words)})
        try:
            return WordChallenge.from_dict(data)
        except ValueError as e:
            raise ServiceError(f"Unusable word data: {e}") from e

    def fetch_illustration(self, prompt: str) -> ImageAsset:
        data = self._post("/api/image", {'prompt': prompt})
        try:
            return ImageAsset.from_data_url(data.get('imageData'))
        except ValueError as e:
            raise ServiceError(f"Unusable image data: {e}") from e

    def fetch_speech(self, word: str) -> bytes:
        data = self._post("/api/tts", {'text': word})
        audio = data.get('audio')
        if not isinstance(audio, str) or not audio:
            raise ServiceError("No audio in TTS response")
        try:
            return base64.b64decode(audio, validate=True)
        except binascii.Error as e:
            raise ServiceError(f"Unusable audio data: {e}") from e

    def fetch_verdict(self, target_word: str, audio: bytes, encoding: str) -> bool:
        data = self._post("/api/pronunciation", {
            'targetWord': target_word,
            'audioBase64': base64.b64encode(audio).decode('ascii'),
            'mimeType': encoding
        })
        correct = data.get('correct')
        if not isinstance(correct, bool):
            raise ServiceError(f"Unusable verdict: {correct!r}")
        return correct
