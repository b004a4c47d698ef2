"""Animated, pausable recognizer run driven from a control surface."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Iterable

from ._automaton import START_STATE
from ._builder import build, parse_keywords
from ._errors import KeytrieInputError, KeytrieRunError
from ._tokenizer import Tokenizer

if TYPE_CHECKING:
    from ._automaton import Automaton
    from ._types import Step, Token

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY = 0.6  # seconds between steps


class Runner:
    """Holds the current automaton and the live position of one run.

    The run advances one step at a time. Between steps it sleeps for
    ``delay`` seconds and, if paused, waits until :meth:`resume` or
    :meth:`reset`. ``state``, ``pos`` and ``current_token`` are only updated
    at step boundaries, so a reader never sees half a character.
    """

    __slots__ = (
        "_delay", "_keyword_on_mismatch", "_automaton",
        "_state", "_pos", "_current_token", "_tokens",
        "_running", "_paused", "_wakeup", "_generation",
    )

    def __init__(
        self,
        *,
        delay: float = DEFAULT_STEP_DELAY,
        keyword_on_mismatch: bool = True,
    ) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._delay = delay
        self._keyword_on_mismatch = keyword_on_mismatch
        self._automaton: Automaton = build(())
        self._state: int | None = START_STATE
        self._pos: int | None = 0
        self._current_token = ""
        self._tokens: list[Token] = []
        self._running = False
        self._paused = False
        self._wakeup: asyncio.Event | None = None
        self._generation = 0

    # -- Observed state --

    @property
    def automaton(self) -> Automaton:
        return self._automaton

    @property
    def state(self) -> int | None:
        """Current automaton state; None once a run has finished."""
        return self._state

    @property
    def pos(self) -> int | None:
        """Current input offset; None once a run has finished."""
        return self._pos

    @property
    def current_token(self) -> str:
        return self._current_token

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    # -- Control surface --

    def generate(self, words: str | Iterable[str]) -> Automaton:
        """Build a fresh automaton from ``words`` and reset the run state.

        A string is split on whitespace, and so is each item of an iterable,
        so no keyword ever contains whitespace. Raises KeytrieInputError when
        no keyword remains.
        """
        if isinstance(words, str):
            words = parse_keywords(words)
        else:
            words = [w for item in words for w in parse_keywords(item)]
        if not words:
            raise KeytrieInputError("keyword list is empty")
        self._automaton = build(words)
        self.reset()
        return self._automaton

    async def run(
        self,
        text: str,
        on_step: Callable[[Step], None] | None = None,
    ) -> list[Token]:
        """Scan ``text`` step by step and return the tokens produced.

        If :meth:`reset` or :meth:`generate` is called while the run is in
        flight, the run stops at its next step boundary and returns what it
        had produced, leaving the runner's fields alone.
        """
        if not text:
            raise KeytrieInputError("scan text is empty")
        if self._running:
            raise KeytrieRunError("a run is already in progress")

        self._generation += 1
        generation = self._generation
        self._running = True
        self._tokens = []
        self._current_token = ""
        self._wakeup = asyncio.Event()
        tokens: list[Token] = []
        tokenizer = Tokenizer(
            self._automaton, keyword_on_mismatch=self._keyword_on_mismatch,
        )
        logger.debug("run %d started on %d characters", generation, len(text))

        try:
            for step in tokenizer.steps(text):
                if step.token is not None:
                    tokens.append(step.token)
                self._publish(step, tokens)
                if on_step is not None:
                    on_step(step)
                await asyncio.sleep(self._delay)
                await self._wait_while_paused(generation)
                if generation != self._generation:
                    logger.debug(
                        "run %d abandoned after %d tokens", generation, len(tokens),
                    )
                    return tokens
        finally:
            if generation == self._generation:
                self._running = False

        self._state = None
        self._pos = None
        self._current_token = ""
        logger.debug("run %d finished with %d tokens", generation, len(tokens))
        return tokens

    def pause(self) -> None:
        """Suspend the run at the next step boundary."""
        if not self._paused:
            logger.debug("paused at pos=%s state=%s", self._pos, self._state)
        self._paused = True

    def resume(self) -> None:
        if self._paused:
            logger.debug("resumed at pos=%s state=%s", self._pos, self._state)
        self._paused = False
        if self._wakeup is not None:
            self._wakeup.set()

    def reset(self) -> None:
        """Return to state 0 at position 0 with no tokens; keep the automaton."""
        self._generation += 1
        self._state = START_STATE
        self._pos = 0
        self._current_token = ""
        self._tokens = []
        self._running = False
        self._paused = False
        if self._wakeup is not None:
            self._wakeup.set()
        logger.debug("reset")

    def _publish(self, step: Step, tokens: list[Token]) -> None:
        self._pos = step.pos
        self._state = step.state
        self._current_token = step.partial
        self._tokens = list(tokens)

    async def _wait_while_paused(self, generation: int) -> None:
        while self._paused and generation == self._generation:
            self._wakeup.clear()
            await self._wakeup.wait()
