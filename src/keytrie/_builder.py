"""Trie construction from a keyword list."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ._automaton import START_STATE, Automaton, fold
from ._types import StateInfo

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"\s+")


def parse_keywords(text: str) -> list[str]:
    """Split a whitespace-delimited keyword string into words.

    Case is left alone; :func:`build` folds each character the way the scan
    does.
    """
    text = text.strip()
    if not text:
        return []
    return [w for w in _SPLIT_RE.split(text) if w]


def build(words: Iterable[str]) -> Automaton:
    """Build a trie-shaped automaton accepting exactly ``words``.

    Words are case-folded one character at a time, so a character maps to the
    same edge whether it sits inside a keyword or in scanned text. Empty words
    are dropped. Every distinct prefix gets one state; ids are allocated in
    insertion order starting at 1.
    Re-inserting a word allocates nothing and re-sets the same final label.
    """
    folded = tuple(fold(w) for w in words if w)

    states: dict[int, StateInfo] = {
        START_STATE: StateInfo(
            state_id=START_STATE, char=None, depth=0, word=None, prefix="",
        ),
    }
    transitions: dict[tuple[int, str], int] = {}
    finals: dict[int, str] = {}
    next_id = START_STATE + 1

    for chars in folded:
        word = "".join(chars)
        state = START_STATE
        for i, char in enumerate(chars):
            target = transitions.get((state, char))
            if target is None:
                target = next_id
                next_id += 1
                transitions[(state, char)] = target
                states[target] = StateInfo(
                    state_id=target,
                    char=char,
                    depth=i + 1,
                    word=word,
                    prefix="".join(chars[: i + 1]),
                )
            state = target
        finals[state] = word.upper()

    automaton = Automaton(
        states, transitions, finals, tuple("".join(chars) for chars in folded),
    )
    logger.debug(
        "built automaton from %d words: %d states, %d final",
        len(folded), automaton.state_count(), automaton.final_state_count(),
    )
    return automaton
