"""FastAPI proxy server for chytanka application.

Holds the Gemini API key and exposes the four calls the game needs:
word generation, illustration, speech synthesis and pronunciation check.
"""

import asyncio
import base64
import binascii
import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

from core.interfaces import AIProvider
from core.config import DEFAULT_ENCODING

from server.gemini_provider import GeminiProvider
from server.file_storage import FileStorage


# Pydantic models for API
class WordRequest(BaseModel):
    excludedWords: list[str] = []


class WordResponse(BaseModel):
    cleanWord: str
    syllables: str
    imagePrompt: str


class ImageRequest(BaseModel):
    prompt: str = ""


class ImageResponse(BaseModel):
    imageData: str  # data:<mime>;base64,<payload>


class SpeechRequest(BaseModel):
    text: str = ""


class SpeechResponse(BaseModel):
    audio: str  # base64


class PronunciationRequest(BaseModel):
    targetWord: str = ""
    audioBase64: str = ""
    mimeType: str = DEFAULT_ENCODING


class PronunciationResponse(BaseModel):
    correct: bool


# Global state (set on startup, replaced in tests)
ai_provider: AIProvider = None


app = FastAPI(title="Chytanka API", description="Syllable reading game proxy")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def load_api_key(storage: FileStorage = None) -> str:
    """Get API key from environment variable first, then fall back to config file."""
    api_key = os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY')
    if not api_key:
        try:
            config = (storage or FileStorage()).load_config()
            api_key = config.get('gemini_api_key')
        except FileNotFoundError:
            pass

    if not api_key:
        raise RuntimeError(
            "GEMINI_API_KEY environment variable not set and config file not found. "
            "Set GEMINI_API_KEY or create ~/.config/chytanka/config.json"
        )
    return api_key


@app.on_event("startup")
async def startup():
    """Initialize the AI provider on startup."""
    global ai_provider
    if ai_provider is None:
        ai_provider = GeminiProvider(load_api_key())
        logger.info("AI provider initialized")


async def run_blocking(func, *args):
    """Run a blocking provider call without blocking the event loop."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, lambda: func(*args))


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "chytanka"}


@app.post("/api/word", response_model=WordResponse)
async def generate_word(request: WordRequest):
    """Generate a new word, avoiding the given ones."""
    word = await run_blocking(ai_provider.generate_word, request.excludedWords)
    logger.info(f"Word: {word['cleanWord']} (excluded {len(request.excludedWords)})")
    return WordResponse(**word)


@app.post("/api/image", response_model=ImageResponse)
async def generate_image(request: ImageRequest):
    """Generate an illustration for the prompt."""
    prompt = request.prompt.strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    image = await run_blocking(ai_provider.generate_image, prompt)
    if image is None:
        raise HTTPException(status_code=502, detail="No image data returned")
    return ImageResponse(imageData=image.to_data_url())


@app.post("/api/tts", response_model=SpeechResponse)
async def synthesize_speech(request: SpeechRequest):
    """Synthesize speech for the text."""
    text = request.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Text is required")

    audio = await run_blocking(ai_provider.synthesize_speech, text)
    if not audio:
        raise HTTPException(status_code=502, detail="No audio returned")
    return SpeechResponse(audio=base64.b64encode(audio).decode('ascii'))


@app.post("/api/pronunciation", response_model=PronunciationResponse)
async def check_pronunciation(request: PronunciationRequest):
    """Judge whether the recording says the target word."""
    if not request.targetWord or not request.audioBase64:
        raise HTTPException(status_code=400, detail="targetWord and audioBase64 are required")
    try:
        audio = base64.b64decode(request.audioBase64, validate=True)
    except binascii.Error:
        raise HTTPException(status_code=400, detail="audioBase64 is not valid base64")

    correct = await run_blocking(
        ai_provider.evaluate_pronunciation, request.targetWord, audio, request.mimeType or DEFAULT_ENCODING
    )
    if correct is None:
        raise HTTPException(status_code=502, detail="No response text returned")
    logger.info(f"Pronunciation of '{request.targetWord}': {'correct' if correct else 'incorrect'}")
    return PronunciationResponse(correct=correct)
