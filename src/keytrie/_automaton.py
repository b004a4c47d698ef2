"""Immutable trie automaton: transition table, final labels and state metadata."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping

from ._search import build_index, find_leftmost_longest
from ._types import KeywordMatch

if TYPE_CHECKING:
    import ahocorasick

    from ._types import StateInfo

START_STATE = 0


class Automaton:
    """Read-only product of :func:`keytrie.build`.

    States are integers with 0 reserved for the start state. Transitions live
    in one flat map keyed by ``(state, char)``; final labels in a sparse map
    keyed by state.
    """

    __slots__ = (
        "_states", "_transitions", "_finals", "_words", "_search_index",
    )

    def __init__(
        self,
        states: dict[int, StateInfo],
        transitions: dict[tuple[int, str], int],
        finals: dict[int, str],
        words: tuple[str, ...] = (),
    ) -> None:
        self._states = MappingProxyType(dict(states))
        self._transitions = MappingProxyType(dict(transitions))
        self._finals = MappingProxyType(dict(finals))
        self._words = tuple(words)
        self._search_index: ahocorasick.Automaton | None = None

    def __repr__(self) -> str:
        return (
            f"Automaton(states={self.state_count()}, "
            f"finals={self.final_state_count()})"
        )

    # -- Query surface --

    def transition(self, state: int, char: str) -> int | None:
        return self._transitions.get((state, char))

    def is_final(self, state: int) -> str | None:
        return self._finals.get(state)

    def state_count(self) -> int:
        return len(self._states)

    def final_state_count(self) -> int:
        return len(self._finals)

    # -- Renderer views --

    @property
    def states(self) -> Mapping[int, StateInfo]:
        return self._states

    @property
    def transitions(self) -> Mapping[tuple[int, str], int]:
        return self._transitions

    @property
    def finals(self) -> Mapping[int, str]:
        return self._finals

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def children(self, state: int) -> dict[str, int]:
        """Outgoing edges of ``state`` as ``{char: target}``."""
        return {
            char: dst
            for (src, char), dst in self._transitions.items()
            if src == state
        }

    def edges(self) -> Iterator[tuple[int, str, int]]:
        for (src, char), dst in self._transitions.items():
            yield src, char, dst

    def max_depth(self) -> int:
        return max(info.depth for info in self._states.values())

    # -- Whole-word and substring queries --

    def lookup(self, word: str, *, stem: bool = False) -> str | None:
        """Return the keyword label for a single whole word, or None.

        Matching is case-insensitive. With ``stem=True`` an unmatched word is
        retried as its Snowball English stem, so ``"cats"`` finds ``CAT``.
        """
        chars = fold(word)
        label = self._walk(chars)
        if label is not None or not stem:
            return label

        import Stemmer

        token = "".join(chars)
        stemmer = Stemmer.Stemmer("english")
        root = stemmer.stemWord(token)
        if root != token:
            return self._walk(fold(root))
        return None

    def find_keywords(self, text: str) -> list[KeywordMatch]:
        """Find keyword occurrences anywhere in ``text``, token boundaries ignored.

        Returns leftmost-longest non-overlapping matches in offset order, with
        offsets into ``text`` itself.
        """
        if not self._finals:
            return []
        if self._search_index is None:
            self._search_index = build_index(self._final_paths())

        # folded offset -> offset of the source character it came from
        origin: list[int] = []
        pieces: list[str] = []
        for i, char in enumerate(fold(text)):
            pieces.append(char)
            origin.extend([i] * len(char))
        matches = find_leftmost_longest(self._search_index, "".join(pieces))
        return [
            KeywordMatch(
                start=origin[m.start], end=origin[m.end - 1] + 1, label=m.label,
            )
            for m in matches
        ]

    def _final_paths(self) -> Iterator[tuple[str, str]]:
        """Yield ``(edge path, label)`` for every final state."""
        parent = {dst: (src, char) for (src, char), dst in self._transitions.items()}
        for state, label in self._finals.items():
            chars: list[str] = []
            while state in parent:
                state, char = parent[state]
                chars.append(char)
            yield "".join(reversed(chars)), label

    def _walk(self, chars: list[str]) -> str | None:
        if not chars:
            return None
        state = START_STATE
        for char in chars:
            nxt = self._transitions.get((state, char))
            if nxt is None:
                return None
            state = nxt
        return self._finals.get(state)


def fold(word: str) -> list[str]:
    """Case-fold ``word`` one character at a time, as the scan does."""
    return [char.lower() for char in word]
