"""Gemini AI provider implementation."""

import json
import logging
import time

import google.generativeai as genai
from google import genai as genai_client
from google.genai import types

from core.interfaces import AIProvider
from core.models import ImageAsset
from core.config import (
    LANGUAGE, EXCLUDED_WORDS_PROMPT_LIMIT,
    WORD_MODEL, IMAGE_MODEL, TTS_MODEL, TTS_VOICE, VERDICT_MODEL
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FALLBACK_WORD = {
    'cleanWord': 'Мила кішка',
    'syllables': 'Ми-ла кіш-ка',
    'imagePrompt': 'cute cat vector icon, white background'
}

WORD_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'cleanWord': {'type': 'STRING'},
        'syllables': {'type': 'STRING'},
        'imagePrompt': {'type': 'STRING'},
    },
    'required': ['cleanWord', 'syllables', 'imagePrompt'],
}

VERDICT_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'correct': {'type': 'BOOLEAN'},
    },
}


class GeminiProvider(AIProvider):
    """Gemini AI provider implementation.

    Text and audio understanding go through google.generativeai. Image and
    speech output need response modalities that only the google.genai client
    exposes, so those two calls use it.
    """

    def __init__(self, api_key: str, model_name: str = WORD_MODEL):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.verdict_model = genai.GenerativeModel(VERDICT_MODEL)
        self.client = genai_client.Client(api_key=api_key)
        self.model_name = model_name

    def _timed(self, label: str, call):
        start_time = time.time()
        response = call()
        ms = int((time.time() - start_time) * 1000)
        logger.info(f"{label} took {ms}ms")
        return response

    def generate_word(self, excluded_words: list) -> dict:
        recent = excluded_words[-EXCLUDED_WORDS_PROMPT_LIMIT:]
        prompt = f"""
            Згенеруй коротку фразу для дитини, яка вчиться читати ({LANGUAGE}).
            Фраза має складатися з 1-3 простих слів (кожне 2-3 склади, не довше 6 літер).
            Теми: тварини, іграшки, їжа, природа, транспорт, предмети вдома.

            ВАЖЛИВО: не використовуй ці фрази (вони вже були): {', '.join(recent) if recent else 'немає'}.
            Фраза має починатися з великої літери, решта малими (Sentence case).

            Поверни JSON об'єкт:
            1. "cleanWord": фраза без поділу (наприклад "Мила кішка").
            2. "syllables": та сама фраза, склади розділені дефісами, слова пробілами
               (наприклад "Ми-ла кіш-ка").
            3. "imagePrompt": англійською, опис для ілюстрації: single isolated object
               representing the phrase, simple vector icon, white background, minimalist, flat style.
        """
        try:
            response = self._timed('Word generation', lambda: self.model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    response_mime_type='application/json',
                    response_schema=WORD_SCHEMA
                )
            ))
            if not response.text:
                raise ValueError("No text returned from word generation")
            word = json.loads(response.text)
            missing = [k for k in WORD_SCHEMA['required'] if not word.get(k)]
            if missing:
                raise ValueError(f"Word response missing keys: {missing}")
            return {k: word[k] for k in WORD_SCHEMA['required']}
        except Exception as e:
            logger.error(f"Word generation error: {e}")
            return dict(FALLBACK_WORD)

    def generate_image(self, prompt: str) -> ImageAsset | None:
        simple_prompt = (
            f"{prompt}, single isolated object, no background, white background, "
            f"simple vector illustration, flat design, minimal details"
        )
        response = self._timed('Image generation', lambda: self.client.models.generate_content(
            model=IMAGE_MODEL,
            contents=simple_prompt
        ))
        for part in self._parts(response):
            inline = getattr(part, 'inline_data', None)
            if inline is not None and inline.data:
                return ImageAsset(inline.mime_type or 'image/png', inline.data)
        logger.warning("Image model returned no image data")
        return None

    def synthesize_speech(self, text: str) -> bytes | None:
        response = self._timed('Speech synthesis', lambda: self.client.models.generate_content(
            model=TTS_MODEL,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=['AUDIO'],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=TTS_VOICE)
                    )
                )
            )
        ))
        for part in self._parts(response):
            inline = getattr(part, 'inline_data', None)
            if inline is not None and inline.data:
                return inline.data
        logger.warning("TTS model returned no audio")
        return None

    def evaluate_pronunciation(self, target_word: str, audio: bytes, mime_type: str) -> bool | None:
        prompt = f"""
            A child is trying to read the {LANGUAGE} phrase: "{target_word}".
            Listen to the audio. Did they say it correctly?
            Ignore minor stuttering, pauses between syllables, or childish accent.
            Return JSON: {{ "correct": true }} or {{ "correct": false }}.
        """
        response = self._timed('Pronunciation check', lambda: self.verdict_model.generate_content(
            [{'mime_type': mime_type, 'data': audio}, prompt],
            generation_config=genai.GenerationConfig(
                response_mime_type='application/json',
                response_schema=VERDICT_SCHEMA
            )
        ))
        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate has no text part
            logger.error(f"No verdict text: {e}")
            return None
        if not text:
            return None
        try:
            result = json.loads(text)
        except ValueError as e:
            logger.error(f"Failed to parse verdict: {e}")
            logger.error(f"Raw response:\n{text}")
            return None
        if not isinstance(result, dict):
            return None
        correct = result.get('correct')
        if not isinstance(correct, bool):
            logger.error(f"Verdict without a boolean 'correct': {text}")
            return None
        return correct

    @staticmethod
    def _parts(response) -> list:
        candidates = getattr(response, 'candidates', None) or []
        if not candidates or candidates[0].content is None:
            return []
        return candidates[0].content.parts or []
