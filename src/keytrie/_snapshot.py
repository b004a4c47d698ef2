"""Automaton snapshots: msgpack tables plus a checksummed manifest."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import msgpack

from ._automaton import START_STATE, Automaton
from ._errors import KeytrieChecksumError, KeytrieError, KeytrieVersionError
from ._types import StateInfo

logger = logging.getLogger(__name__)

_FORMAT_VERSION = "1.0"

_DATA_FILE = "automaton.bin"
_MANIFEST_FILE = "manifest.json"


def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def save(automaton: Automaton, out_dir: Path | str) -> Path:
    """Write ``automaton`` into ``out_dir`` and return the directory path."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    payload = {
        "words": list(automaton.words),
        # [id, char, depth, word, prefix]; state 0 is implied
        "states": [
            [info.state_id, info.char, info.depth, info.word, info.prefix]
            for sid, info in sorted(automaton.states.items())
            if sid != START_STATE
        ],
        "transitions": [list(edge) for edge in automaton.edges()],
        "finals": [[sid, label] for sid, label in sorted(automaton.finals.items())],
    }
    data_path = out_dir / _DATA_FILE
    with open(data_path, "wb") as f:
        f.write(msgpack.packb(payload, use_bin_type=True))

    manifest = {
        "version": _FORMAT_VERSION,
        "files": {_DATA_FILE: _sha256(data_path)},
    }
    with open(out_dir / _MANIFEST_FILE, "w") as f:
        json.dump(manifest, f, indent=2)

    logger.debug("saved %r to %s", automaton, out_dir)
    return out_dir


def _read_manifest(data_dir: Path) -> dict[str, Any]:
    manifest_path = data_dir / _MANIFEST_FILE
    if not manifest_path.exists():
        raise KeytrieError(f"{_MANIFEST_FILE} not found in {data_dir}")
    with open(manifest_path) as f:
        return json.load(f)


def _validate_manifest(manifest: dict[str, Any], data_dir: Path) -> None:
    version = manifest.get("version")
    if version != _FORMAT_VERSION:
        raise KeytrieVersionError(
            f"Expected snapshot version {_FORMAT_VERSION!r}, got {version!r}"
        )
    filepath = data_dir / _DATA_FILE
    if not filepath.exists():
        raise KeytrieError(f"Missing data file: {filepath}")
    expected = manifest.get("files", {}).get(_DATA_FILE)
    if expected is None:
        raise KeytrieError(f"No checksum in manifest for {_DATA_FILE}")
    actual = _sha256(filepath)
    if actual != expected:
        raise KeytrieChecksumError(
            f"Checksum mismatch for {_DATA_FILE}: "
            f"expected {expected[:16]}..., got {actual[:16]}..."
        )


def _check_tree(
    states: dict[int, StateInfo],
    transitions: dict[tuple[int, str], int],
    finals: dict[int, str],
) -> None:
    """Every non-start state has one incoming edge, consistent with its metadata."""
    incoming: dict[int, tuple[int, str]] = {}
    for (src, char), dst in transitions.items():
        if src not in states or dst not in states:
            raise KeytrieError(
                f"Transition {src} -{char}-> {dst} names an unknown state"
            )
        if dst == START_STATE or dst in incoming:
            raise KeytrieError(f"State {dst} has more than one incoming edge")
        info = states[dst]
        if info.char != char or info.depth != states[src].depth + 1:
            raise KeytrieError(
                f"State {dst} metadata disagrees with its edge from {src}"
            )
        incoming[dst] = (src, char)
    for sid in states:
        if sid != START_STATE and sid not in incoming:
            raise KeytrieError(f"State {sid} is unreachable")
    if START_STATE in finals:
        raise KeytrieError("Start state cannot be final")
    for sid in finals:
        if sid not in states:
            raise KeytrieError(f"Final label on unknown state {sid}")


def _unpack_tables(
    raw: dict[str, Any],
) -> tuple[dict[int, StateInfo], dict[tuple[int, str], int], dict[int, str]]:
    states: dict[int, StateInfo] = {
        START_STATE: StateInfo(
            state_id=START_STATE, char=None, depth=0, word=None, prefix="",
        ),
    }
    for sid, char, depth, word, prefix in raw["states"]:
        if sid in states:
            raise KeytrieError(f"Duplicate state id {sid}")
        states[sid] = StateInfo(
            state_id=sid, char=char, depth=depth, word=word, prefix=prefix,
        )
    transitions: dict[tuple[int, str], int] = {}
    for src, char, dst in raw["transitions"]:
        if (src, char) in transitions:
            raise KeytrieError(f"Duplicate transition {src} -{char}->")
        transitions[(src, char)] = dst
    finals = {sid: label for sid, label in raw["finals"]}
    return states, transitions, finals


def load(path: Path | str) -> Automaton:
    """Load and validate a snapshot directory written by :func:`save`."""
    data_dir = Path(path)
    manifest = _read_manifest(data_dir)
    _validate_manifest(manifest, data_dir)

    with open(data_dir / _DATA_FILE, "rb") as f:
        blob = f.read()

    try:
        raw = msgpack.unpackb(blob, raw=False)
        states, transitions, finals = _unpack_tables(raw)
        words = tuple(raw["words"])
        _check_tree(states, transitions, finals)
    except (KeyError, TypeError, ValueError) as e:
        raise KeytrieError(f"Malformed {_DATA_FILE}: {e}") from e

    automaton = Automaton(states, transitions, finals, words)
    logger.debug("loaded %r from %s", automaton, data_dir)
    return automaton
