"""Configuration constants for chytanka application."""

LANGUAGE = 'Ukrainian'

# Round rules
MAX_ATTEMPTS = 3              # Failed attempts before the round is lost
HINT_AFTER_ATTEMPTS = 2       # Failed attempts before "listen" is offered

# Recency history
HISTORY_KEY = 'read_word_history'
RETENTION_WINDOW_MS = 24 * 60 * 60 * 1000  # 24 hours

# Recording
PREFERRED_ENCODINGS = ['audio/webm;codecs=opus', 'audio/webm', 'audio/wav']
DEFAULT_ENCODING = 'audio/webm'
CAPTURE_SAMPLE_RATE = 16000

# Playback
PCM_SAMPLE_RATE = 24000       # Raw speech payloads are 16-bit mono at this rate

# Proxy
EXCLUDED_WORDS_PROMPT_LIMIT = 50
DEFAULT_SERVER_URL = 'http://localhost:4000'
DEFAULT_SERVER_PORT = 4000
REQUEST_TIMEOUT = 60          # seconds

# Models
WORD_MODEL = 'gemini-2.5-flash'
IMAGE_MODEL = 'gemini-2.5-flash-image'
TTS_MODEL = 'gemini-2.5-flash-preview-tts'
TTS_VOICE = 'Kore'
VERDICT_MODEL = 'gemini-2.5-flash'
