import dataclasses
import json

import pytest

from regfa.fsm import DFADesign, NFADesign
from regfa.rulebook import UndefinedTransition, rule


@pytest.fixture
def dfa_design():
    # strings over {a, b} that are all b's or contain `ab`
    return DFADesign.from_rules(
        1,
        {1, 3},
        [
            rule(1, "a", 2),
            rule(1, "b", 1),
            rule(2, "a", 2),
            rule(2, "b", 3),
            rule(3, "a", 3),
            rule(3, "b", 3),
        ],
    )


@pytest.fixture
def third_from_last_b():
    return NFADesign.from_rules(
        1,
        {4},
        [
            rule(1, "a", 1),
            rule(1, "b", 1),
            rule(1, "b", 2),
            rule(2, "a", 3),
            rule(2, "b", 3),
            rule(3, "a", 4),
            rule(3, "b", 4),
        ],
    )


@pytest.fixture
def multiple_of_two_or_three():
    return NFADesign.from_rules(
        1,
        {2, 4},
        [
            rule(1, None, 2),
            rule(1, None, 4),
            rule(2, "a", 3),
            rule(3, "a", 2),
            rule(4, "a", 5),
            rule(5, "a", 6),
            rule(6, "a", 4),
        ],
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", True),
        ("b", True),
        ("ab", True),
        ("aa", False),
        ("ba", False),
        ("baab", True),
        ("bbba", False),
    ],
)
def test_dfa_design_accepts(dfa_design, text, expected):
    assert dfa_design.accepts(text) is expected


def test_dfa_runtime_reads_one_character_at_a_time(dfa_design):
    dfa = dfa_design.new_dfa()
    assert dfa.accepting
    dfa.read_character("a")
    assert dfa.current_state == 2
    assert not dfa.accepting
    dfa.read_string("b")
    assert dfa.current_state == 3
    assert dfa.accepting


def test_dfa_design_is_not_changed_by_runtimes(dfa_design):
    dfa = dfa_design.new_dfa()
    dfa.read_string("ab")
    assert dfa_design.new_dfa().current_state == 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        dfa_design.start_state = 2  # type: ignore


def test_dfa_undefined_character_is_fatal(dfa_design):
    with pytest.raises(UndefinedTransition):
        dfa_design.accepts("abc")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("bab", True),
        ("bbbbb", True),
        ("bbabb", False),
        ("", False),
        ("b", False),
        ("abaa", True),
    ],
)
def test_hand_built_nfa(third_from_last_b, text, expected):
    assert third_from_last_b.accepts(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", True),
        ("a", False),
        ("aa", True),
        ("aaa", True),
        ("aaaa", True),
        ("aaaaa", False),
        ("aaaaaa", True),
    ],
)
def test_nfa_with_free_moves(multiple_of_two_or_three, text, expected):
    assert multiple_of_two_or_three.accepts(text) is expected


def test_nfa_runtime_uses_free_closure(multiple_of_two_or_three):
    nfa = multiple_of_two_or_three.new_nfa()
    assert nfa.moving == {1}
    assert nfa.current_states == {1, 2, 4}
    assert nfa.accepting
    nfa.read_character("a")
    assert nfa.current_states == {3, 5}
    assert not nfa.accepting
    nfa.read_string("a")
    assert nfa.current_states == {2, 6}
    assert nfa.accepting


def test_nfa_dead_end_rejects_without_raising(third_from_last_b):
    assert third_from_last_b.accepts("abc") is False
    nfa = third_from_last_b.new_nfa()
    nfa.read_string("c")
    assert nfa.current_states == frozenset()
    assert not nfa.accepting


def test_nfa_design_reuse_is_order_independent(multiple_of_two_or_three):
    texts = ["", "a", "aa", "aaa", "aaaaa", "aaaaaa", "b"]
    forward = [multiple_of_two_or_three.accepts(text) for text in texts]
    backward = [multiple_of_two_or_three.accepts(text) for text in reversed(texts)]
    assert forward == backward[::-1]


def test_to_json(third_from_last_b):
    exported = json.loads(third_from_last_b.to_json())
    assert exported["states"] == [1, 2, 3, 4]
    assert exported["symbols"] == ["a", "b"]
    assert exported["start_state"] == 1
    assert exported["accept_states"] == [4]
    assert [1, "b", 2] in exported["transitions"]
    assert len(exported["transitions"]) == 7


def test_to_json_encodes_free_moves_as_null(multiple_of_two_or_three):
    exported = json.loads(multiple_of_two_or_three.to_json())
    assert [1, None, 2] in exported["transitions"]
    assert exported["symbols"] == ["a"]


def test_graph(multiple_of_two_or_three, dfa_design):
    source = multiple_of_two_or_three.graph().source
    assert "doublecircle" in source
    assert "ε" in source
    assert "start -> 1" in source
    assert "doublecircle" in dfa_design.graph().source
