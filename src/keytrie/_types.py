"""Data structures for keytrie."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenKind(str, enum.Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"


@dataclass(slots=True, frozen=True)
class StateInfo:
    state_id: int
    char: str | None     # edge label leading in; None for the start state
    depth: int           # length of the matched prefix
    word: str | None     # keyword that first allocated this state
    prefix: str


@dataclass(slots=True, frozen=True)
class Token:
    kind: TokenKind
    value: str           # source text, original case
    position: int        # start offset in the scanned input
    label: str | None = None

    @property
    def end(self) -> int:
        return self.position + len(self.value)


@dataclass(slots=True, frozen=True)
class Step:
    pos: int
    state: int
    partial: str
    token: Token | None = None   # set when this step finalizes a token


@dataclass(slots=True, frozen=True)
class KeywordMatch:
    start: int
    end: int             # exclusive
    label: str
