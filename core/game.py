"""Game state machine for one player reading words aloud."""

import asyncio
import logging
from typing import Callable

from .capture import MediaCaptureSession
from .config import MAX_ATTEMPTS, HINT_AFTER_ATTEMPTS
from .errors import CaptureError, InvalidTransition
from .interfaces import ContentProvider
from .models import GameState, RoundSession, Verdict
from .playback import AudioPlaybackAdapter
from .recency import RecencyStore

logger = logging.getLogger(__name__)


class GameController:
    """Owns the round state and sequences fetching, recording and judging.

    Runs on a single asyncio loop. Provider calls block, so they are sent
    to the loop's default executor. Illustration and speech are prefetched
    in the background once per round; their results are applied only while
    the round that requested them is still current.
    """

    def __init__(self, provider: ContentProvider, recency: RecencyStore,
                 capture: MediaCaptureSession, playback: AudioPlaybackAdapter = None,
                 max_attempts: int = MAX_ATTEMPTS, hint_after: int = HINT_AFTER_ATTEMPTS):
        self.provider = provider
        self.recency = recency
        self.capture = capture
        self.playback = playback
        self.max_attempts = max_attempts
        self.hint_after = hint_after

        self.state = GameState.INITIAL
        self.round: RoundSession | None = None
        self.last_error: Exception | None = None
        self.prefetch_task: asyncio.Task | None = None
        self._abandoned_tasks: set[asyncio.Task] = set()
        self._round_counter = 0
        self._listeners: list[Callable] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_listener(self, listener: Callable) -> None:
        """Register listener(old_state, new_state), called on every transition."""
        self._listeners.append(listener)

    def _set_state(self, new_state: GameState) -> None:
        old_state = self.state
        self.state = new_state
        logger.info(f"{old_state.value} -> {new_state.value}")
        for listener in self._listeners:
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(f"State listener failed: {e}")

    def _require(self, *states: GameState) -> None:
        if self.state not in states:
            allowed = ', '.join(s.value for s in states)
            raise InvalidTransition(f"Not allowed in {self.state.value} (needs {allowed})")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def round_id(self) -> int:
        return self._round_counter

    @property
    def challenge(self):
        return self.round.challenge if self.round else None

    @property
    def attempt_count(self) -> int:
        return self.round.attempt_count if self.round else 0

    @property
    def attempts_left(self) -> int:
        return self.max_attempts - self.attempt_count

    @property
    def media_loading(self) -> bool:
        return bool(self.round and self.round.media_loading)

    @property
    def is_round_over(self) -> bool:
        return self.state in (GameState.SUCCESS, GameState.FAILURE)

    @property
    def visible_illustration(self):
        """The illustration, but only once the word was read correctly."""
        if self.state is GameState.SUCCESS and self.round:
            return self.round.illustration
        return None

    @property
    def can_play_word(self) -> bool:
        return (
            self.round is not None
            and self.round.speech is not None
            and self.round.attempt_count >= self.hint_after
            and self.state not in (GameState.RECORDING, GameState.EVALUATING)
        )

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(*args))

    async def start(self) -> None:
        """Load the first round."""
        self._require(GameState.INITIAL)
        await self._load_round()

    async def advance(self) -> None:
        """Move on to the next word after the round is over."""
        self._require(GameState.SUCCESS, GameState.FAILURE, GameState.ERROR)
        await self._load_round()

    async def retry(self) -> None:
        """Try loading a word again after a failed word fetch."""
        self._require(GameState.ERROR)
        await self._load_round()

    async def _load_round(self) -> None:
        self._round_counter += 1
        round_id = self._round_counter
        self.round = None
        self._abandon_prefetch()
        self.last_error = None
        self._set_state(GameState.LOADING)

        try:
            excluded = await self._run(self.recency.get_exclusions)
            challenge = await self._run(self.provider.fetch_word, excluded)
        except Exception as e:
            logger.error(f"Word fetch failed: {e}")
            if round_id == self._round_counter:
                self.last_error = e
                self._set_state(GameState.ERROR)
            return

        if round_id != self._round_counter:
            logger.info(f"Discarding word for abandoned round {round_id}")
            return

        await self._run(self.recency.record, challenge.normalized_word)
        self.round = RoundSession(round_id, challenge)
        self._set_state(GameState.READY)
        self._start_prefetch(self.round)

    def _abandon_prefetch(self) -> None:
        # Tasks of abandoned rounds keep running until their fetches settle
        task = self.prefetch_task
        self.prefetch_task = None
        if task is not None and not task.done():
            self._abandoned_tasks.add(task)
            task.add_done_callback(self._abandoned_tasks.discard)

    def _start_prefetch(self, session: RoundSession) -> None:
        session.media_loading = True
        self.prefetch_task = asyncio.create_task(self._prefetch_media(session))

    async def _prefetch_media(self, session: RoundSession) -> None:
        challenge = session.challenge
        image, speech = await asyncio.gather(
            self._run(self.provider.fetch_illustration, challenge.illustration_prompt),
            self._run(self.provider.fetch_speech, challenge.normalized_word),
            return_exceptions=True
        )

        if session.round_id != self._round_counter:
            logger.info(f"Discarding media for abandoned round {session.round_id}")
            return

        if isinstance(image, BaseException):
            logger.error(f"Image load error: {image}")
        else:
            session.illustration = image

        if isinstance(speech, BaseException):
            logger.error(f"TTS load error: {speech}")
        else:
            session.speech = speech

        session.media_loading = False

    async def wait_for_media(self) -> None:
        """Wait until the current round's background fetches have settled."""
        if self.prefetch_task is not None:
            await self.prefetch_task

    # ------------------------------------------------------------------
    # Attempts
    # ------------------------------------------------------------------

    def start_recording(self) -> None:
        """Open the microphone. Permission problems leave the state at READY."""
        self._require(GameState.READY)
        try:
            self.capture.open()
        except CaptureError as e:
            logger.error(f"Mic error: {e}")
            self.last_error = e
            raise
        self.last_error = None
        self._set_state(GameState.RECORDING)

    async def stop_recording(self) -> Verdict:
        """Finish the recording and have it judged."""
        self._require(GameState.RECORDING)
        session = self.round

        try:
            audio = self.capture.stop()
        except CaptureError as e:
            logger.error(f"Could not finalize recording: {e}")
            self.last_error = e
            self._set_state(GameState.READY)
            raise

        self._set_state(GameState.EVALUATING)
        try:
            correct = await self._run(
                self.provider.fetch_verdict, session.challenge.normalized_word, audio.data, audio.encoding
            )
        except Exception as e:
            logger.error(f"Pronunciation check error: {e}")
            self.last_error = e
            self._set_state(GameState.READY)
            return Verdict.UNAVAILABLE

        if correct:
            self._set_state(GameState.SUCCESS)
            self._cue('success')
            return Verdict.CORRECT

        session.attempt_count += 1
        self._cue('failure')
        logger.info(f"Attempt {session.attempt_count}/{self.max_attempts} failed")
        if session.attempt_count >= self.max_attempts:
            self._set_state(GameState.FAILURE)
        else:
            self._set_state(GameState.READY)
        return Verdict.INCORRECT

    def cancel_recording(self) -> None:
        """Drop the recording in progress without judging it."""
        self._require(GameState.RECORDING)
        self.capture.abort()
        self._set_state(GameState.READY)

    def play_word(self) -> bool:
        """Play the synthesized word, if it arrived. Returns False otherwise."""
        if not self.can_play_word or self.playback is None:
            return False
        return self.playback.play(self.round.speech)

    def _cue(self, kind: str) -> None:
        if self.playback is not None:
            self.playback.play_cue(kind)

    def shutdown(self) -> None:
        """Release the microphone if a recording is still open."""
        self.capture.abort()
