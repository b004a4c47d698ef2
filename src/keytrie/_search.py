"""Aho-Corasick keyword search over free text."""

from __future__ import annotations

from typing import Iterable

import ahocorasick

from ._types import KeywordMatch


def build_index(keywords: Iterable[tuple[str, str]]) -> ahocorasick.Automaton:
    """Build an Aho-Corasick automaton over ``(folded word, label)`` pairs."""
    ac = ahocorasick.Automaton()
    for word, label in keywords:
        if word:
            ac.add_word(word, (word, label))
    ac.make_automaton()
    return ac


def find_leftmost_longest(
    ac: ahocorasick.Automaton, text_lower: str
) -> list[KeywordMatch]:
    """Greedy leftmost-longest non-overlapping selection over all raw matches."""
    if len(ac) == 0:
        return []

    raw_matches: list[tuple[int, int, str]] = []  # (start, end, label)
    for end_inclusive, (word, label) in ac.iter(text_lower):
        end = end_inclusive + 1
        raw_matches.append((end - len(word), end, label))

    # Sort by start position, then by length descending (longest first)
    raw_matches.sort(key=lambda m: (m[0], -(m[1] - m[0])))

    matches: list[KeywordMatch] = []
    last_end = -1
    for start, end, label in raw_matches:
        if start >= last_end:
            matches.append(KeywordMatch(start=start, end=end, label=label))
            last_end = end
    return matches
