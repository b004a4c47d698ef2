"""Tests for trie construction."""

import random

import keytrie
from keytrie import START_STATE, build, parse_keywords


def _prefix_labels(automaton):
    """Map each final state's prefix to its label, independent of state ids."""
    return {
        automaton.states[sid].prefix: label
        for sid, label in automaton.finals.items()
    }


def test_empty_word_list():
    """No words should leave only the start state."""
    automaton = build([])
    assert automaton.state_count() == 1
    assert automaton.final_state_count() == 0
    assert dict(automaton.transitions) == {}
    assert automaton.is_final(START_STATE) is None


def test_empty_words_discarded():
    automaton = build(["", "cat", ""])
    assert automaton.words == ("cat",)
    assert automaton.state_count() == 4


def test_single_word_chain():
    automaton = build(["cat"])
    assert dict(automaton.transitions) == {(0, "c"): 1, (1, "a"): 2, (2, "t"): 3}
    assert dict(automaton.finals) == {3: "CAT"}


def test_state_metadata():
    automaton = build(["dog"])
    info = automaton.states[2]
    assert info.char == "o"
    assert info.depth == 2
    assert info.word == "dog"
    assert info.prefix == "do"
    start = automaton.states[START_STATE]
    assert start.char is None
    assert start.depth == 0
    assert start.prefix == ""


def test_shared_prefix(shared_prefix):
    """cat/car/category share 'ca'; 'cat' is final and still continues."""
    assert shared_prefix.state_count() == 10
    assert shared_prefix.final_state_count() == 3
    assert shared_prefix.transition(2, "t") == 3
    assert shared_prefix.transition(2, "r") == 4
    assert shared_prefix.is_final(3) == "CAT"
    assert shared_prefix.transition(3, "e") is not None


def test_prefix_state_keeps_first_word(shared_prefix):
    """States are attributed to the word that allocated them."""
    assert shared_prefix.states[2].word == "cat"
    assert shared_prefix.states[4].word == "car"


def test_case_folding():
    automaton = build(["CaT"])
    assert automaton.transition(0, "c") == 1
    assert automaton.transition(0, "C") is None
    assert automaton.is_final(3) == "CAT"
    assert automaton.words == ("cat",)


def test_duplicates_idempotent():
    """Re-inserting a word must not allocate states."""
    once = build(["cat", "dog"])
    twice = build(["cat", "dog", "cat", "DOG", "Cat"])
    assert dict(once.transitions) == dict(twice.transitions)
    assert dict(once.finals) == dict(twice.finals)


def test_same_list_same_tables():
    words = ["if", "then", "else", "end", "elif"]
    a = build(words)
    b = build(words)
    assert dict(a.transitions) == dict(b.transitions)
    assert dict(a.finals) == dict(b.finals)


def test_order_independent_prefixes():
    """Any insertion order accepts the same words, ids aside."""
    words = ["begin", "end", "start", "stop", "be", "ending"]
    shuffled = list(words)
    random.Random(7).shuffle(shuffled)
    a = build(words)
    b = build(shuffled)
    assert a.state_count() == b.state_count()
    assert _prefix_labels(a) == _prefix_labels(b)


def test_ids_monotonic():
    automaton = build(["red", "blue", "green"])
    assert sorted(automaton.states) == list(range(automaton.state_count()))
    for (src, _), dst in automaton.transitions.items():
        assert dst > src


def test_tree_shape():
    """Each non-start state has exactly one incoming edge and a unique prefix."""
    automaton = build(["apple", "apply", "banana", "band", "ban"])
    targets = list(automaton.transitions.values())
    assert len(targets) == len(set(targets))
    assert START_STATE not in targets
    assert set(targets) == set(automaton.states) - {START_STATE}
    prefixes = [info.prefix for info in automaton.states.values()]
    assert len(prefixes) == len(set(prefixes))


def test_non_letter_characters():
    automaton = build(["c++", "x86"])
    assert automaton.lookup("c++") == "C++"
    assert automaton.lookup("x86") == "X86"


def test_parse_keywords():
    assert parse_keywords("  Cat dog\tBIRD\n ") == ["Cat", "dog", "BIRD"]


def test_parse_keywords_empty():
    assert parse_keywords("") == []
    assert parse_keywords("   ") == []


def test_parse_keywords_keeps_duplicates():
    assert parse_keywords("cat cat") == ["cat", "cat"]


def test_build_accepts_generator():
    automaton = keytrie.build(w for w in parse_keywords("if then else"))
    assert automaton.final_state_count() == 3


def test_fold_per_character():
    """Final sigma and dotted capital I fold the same way the scan folds them."""
    greek = build(["ΟΔΟΣ"])
    assert greek.transition(3, "σ") == 4
    assert greek.words == ("οδοσ",)
    dotted = build(["İf"])
    assert dotted.transition(START_STATE, "İ".lower()) == 1
    assert dotted.states[1].depth == 1
    assert dotted.state_count() == 3
