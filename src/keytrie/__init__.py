"""Keytrie: trie-automaton keyword recognizer with a steppable scan."""

from __future__ import annotations

import logging

from ._automaton import START_STATE, Automaton
from ._builder import build, parse_keywords
from ._errors import (
    KeytrieChecksumError,
    KeytrieError,
    KeytrieInputError,
    KeytrieRunError,
    KeytrieVersionError,
)
from ._snapshot import load, save
from ._tokenizer import Tokenizer, scan
from ._types import KeywordMatch, StateInfo, Step, Token, TokenKind

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "build",
    "load",
    "save",
    "scan",
    "parse_keywords",
    "Automaton",
    "KeytrieChecksumError",
    "KeytrieError",
    "KeytrieInputError",
    "KeytrieRunError",
    "KeytrieVersionError",
    "KeywordMatch",
    "Runner",
    "START_STATE",
    "StateInfo",
    "Step",
    "Token",
    "TokenKind",
    "Tokenizer",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())


# Deferred import so Runner is available as keytrie.Runner without pulling
# in asyncio for callers that only build and scan.
def __getattr__(name: str):
    if name == "Runner":
        from ._runner import Runner
        return Runner
    raise AttributeError(f"module 'keytrie' has no attribute {name!r}")
