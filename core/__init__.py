from .models import (
    GameState, Verdict, WordChallenge, RecencyRecord,
    ImageAsset, CapturedAudio, RoundSession
)
from .interfaces import ContentProvider, AIProvider, KeyValueStorage, CaptureDevice, PlaybackDevice
from .errors import (
    ChytankaError, ServiceError, InvalidTransition,
    CaptureError, PermissionDenied, DeviceUnavailable, CaptureInProgress
)
from .recency import RecencyStore
from .capture import MediaCaptureSession, CaptureSession
from .playback import AudioPlaybackAdapter, DecodeStrategy, DecodedAudio
from .game import GameController
from .config import (
    MAX_ATTEMPTS, HINT_AFTER_ATTEMPTS,
    HISTORY_KEY, RETENTION_WINDOW_MS,
    PREFERRED_ENCODINGS, DEFAULT_ENCODING, PCM_SAMPLE_RATE, LANGUAGE
)

__all__ = [
    'GameState', 'Verdict', 'WordChallenge', 'RecencyRecord',
    'ImageAsset', 'CapturedAudio', 'RoundSession',
    'ContentProvider', 'AIProvider', 'KeyValueStorage', 'CaptureDevice', 'PlaybackDevice',
    'ChytankaError', 'ServiceError', 'InvalidTransition',
    'CaptureError', 'PermissionDenied', 'DeviceUnavailable', 'CaptureInProgress',
    'RecencyStore',
    'MediaCaptureSession', 'CaptureSession',
    'AudioPlaybackAdapter', 'DecodeStrategy', 'DecodedAudio',
    'GameController',
    'MAX_ATTEMPTS', 'HINT_AFTER_ATTEMPTS',
    'HISTORY_KEY', 'RETENTION_WINDOW_MS',
    'PREFERRED_ENCODINGS', 'DEFAULT_ENCODING', 'PCM_SAMPLE_RATE', 'LANGUAGE'
]
