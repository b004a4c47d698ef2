"""Keyword/identifier scan over a trie automaton, exposed step by step."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterator

from ._automaton import START_STATE
from ._types import Step, Token, TokenKind

if TYPE_CHECKING:
    from ._automaton import Automaton

_SPACE_RE = re.compile(r"\s+")
_LETTERS_RE = re.compile(r"[A-Za-z]*")


class Tokenizer:
    """Splits text into KEYWORD and IDENTIFIER tokens.

    ``keyword_on_mismatch`` decides what happens when a partial match fails on
    a state that is itself final (``cat`` followed by ``egory``). When True the
    pending text is emitted as a KEYWORD, the same check the whitespace and
    end-of-input paths make. When False it is always emitted as an
    IDENTIFIER, so a keyword glued to further letters never counts.
    """

    __slots__ = ("_automaton", "_keyword_on_mismatch")

    def __init__(
        self, automaton: Automaton, *, keyword_on_mismatch: bool = True
    ) -> None:
        self._automaton = automaton
        self._keyword_on_mismatch = keyword_on_mismatch

    @property
    def automaton(self) -> Automaton:
        return self._automaton

    def scan(self, text: str) -> list[Token]:
        """Tokenize ``text`` in one pass."""
        return [step.token for step in self.steps(text) if step.token is not None]

    def steps(self, text: str) -> Iterator[Step]:
        """Run the scan as a sequence of observable steps.

        A step without a token follows every consumed character, with ``pos``
        already past it. A step carrying a token comes right before that
        token is finalized.
        """
        automaton = self._automaton
        n = len(text)
        pos = 0
        state = START_STATE
        token_start = 0
        current = ""

        while pos < n:
            space = _SPACE_RE.match(text, pos)
            if space is not None:
                if state != START_STATE:
                    token = self._finish(state, current, token_start)
                    if token is not None:
                        yield Step(pos, state, current, token)
                    state = START_STATE
                    current = ""
                pos = space.end()
                token_start = pos
                continue

            char = text[pos]
            target = automaton.transition(state, char.lower())
            if target is not None:
                state = target
                current += char
                pos += 1
                yield Step(pos, state, current)
            elif state == START_STATE:
                # Nothing starts here: take this character and the letters after it.
                end = _LETTERS_RE.match(text, pos + 1).end()
                value = text[pos:end]
                token = Token(TokenKind.IDENTIFIER, value, token_start)
                yield Step(end, state, value, token)
                pos = end
                token_start = pos
                current = ""
            else:
                label = automaton.is_final(state) if self._keyword_on_mismatch else None
                if label is not None:
                    token = Token(TokenKind.KEYWORD, current, token_start, label)
                else:
                    token = Token(TokenKind.IDENTIFIER, current, token_start)
                yield Step(pos, state, current, token)
                # Retry the same character from the start state.
                state = START_STATE
                current = ""
                token_start = pos

        if state != START_STATE:
            token = self._finish(state, current, token_start)
            if token is not None:
                yield Step(pos, state, current, token)

    def _finish(self, state: int, current: str, start: int) -> Token | None:
        label = self._automaton.is_final(state)
        if label is not None:
            return Token(TokenKind.KEYWORD, current, start, label)
        if current:
            return Token(TokenKind.IDENTIFIER, current, start)
        return None


def scan(
    automaton: Automaton, text: str, *, keyword_on_mismatch: bool = True
) -> list[Token]:
    """Tokenize ``text`` against ``automaton``."""
    return Tokenizer(automaton, keyword_on_mismatch=keyword_on_mismatch).scan(text)
