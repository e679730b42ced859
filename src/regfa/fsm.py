import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

import graphviz

from regfa.rulebook import DFARulebook, NFARulebook, Rule
from regfa.symbols import EPSILON, Char, Free
from regfa.utils import State

logger = logging.getLogger(__name__)


class DesignExportMixin:
    """graphviz and JSON export shared by the deterministic and nondeterministic designs"""

    __slots__ = ()

    start_state: State
    accept_states: frozenset[State]
    rulebook: DFARulebook | NFARulebook

    def states(self) -> frozenset[State]:
        return self.rulebook.states() | self.accept_states | {self.start_state}

    def graph(self) -> graphviz.Digraph:
        """
        Build a graphviz digraph of this automaton, rendering is left to the caller

        Examples
        --------
        >>> dot = NFADesign.from_rules(1, {2}, [(1, 'a', 2)]).graph()
        >>> 'doublecircle' in dot.source
        True
        """
        dot = graphviz.Digraph(
            self.__class__.__name__,
            format="pdf",
            engine="dot",
        )
        dot.attr("graph", rankdir="LR")
        dot.attr("node", fontname="verdana")
        dot.attr("edge", fontname="verdana")

        for state in sorted(self.states()):
            dot.node(
                str(state),
                color="green" if state == self.start_state else "",
                shape="doublecircle" if state in self.accept_states else "circle",
                style="filled",
            )

        for state, symbol, target in self.rulebook:
            if symbol == EPSILON:
                dot.edge(
                    str(state), str(target), label="ε", color="blue", style="dotted"
                )
            else:
                dot.edge(str(state), str(target), label=str(symbol), color="black")

        dot.node("start", shape="none")
        dot.edge("start", f"{self.start_state}", arrowhead="vee")
        return dot

    def to_json(self) -> str:
        class CustomEncoder(json.JSONEncoder):
            def default(self, o: Any) -> Any:
                if isinstance(o, Char):
                    return o.char
                if isinstance(o, Free):
                    return None
                if isinstance(o, (set, frozenset)):
                    return sorted(o)
                return json.JSONEncoder.default(self, o)

        return json.dumps(
            {
                "states": self.states(),
                "symbols": sorted(symbol.char for symbol in self.rulebook.alphabet()),
                "start_state": self.start_state,
                "accept_states": self.accept_states,
                "transitions": list(self.rulebook),
            },
            cls=CustomEncoder,
        )


@dataclass(slots=True)
class DFA:
    """A running deterministic automaton, created fresh for every match"""

    current_state: State
    accept_states: frozenset[State]
    rulebook: DFARulebook

    @property
    def accepting(self) -> bool:
        return self.current_state in self.accept_states

    def read_character(self, char: str) -> None:
        self.current_state = self.rulebook.next_state(self.current_state, Char(char))

    def read_string(self, text: str) -> None:
        for char in text:
            self.read_character(char)


@dataclass(frozen=True, slots=True)
class DFADesign(DesignExportMixin):
    """
    Blueprint of a deterministic automaton built by hand from explicit rules

    The caller is responsible for supplying a rule for every reachable
    (state, character) pair, a missing one raises ``UndefinedTransition``.

    Examples
    --------
    >>> design = DFADesign.from_rules(
    ...     1,
    ...     {1, 3},
    ...     [(1, 'a', 2), (1, 'b', 1), (2, 'a', 2), (2, 'b', 3), (3, 'a', 3), (3, 'b', 3)],
    ... )
    >>> design.accepts('ab'), design.accepts('aa'), design.accepts('ba')
    (True, False, False)
    """

    start_state: State
    accept_states: frozenset[State]
    rulebook: DFARulebook

    def __post_init__(self):
        object.__setattr__(self, "accept_states", frozenset(self.accept_states))

    @staticmethod
    def from_rules(
        start_state: State, accept_states: Iterable[State], rules: Iterable[Rule]
    ) -> "DFADesign":
        rulebook = DFARulebook.from_rules(rules)
        logger.debug("built a DFA design with %d rules", len(rulebook))
        return DFADesign(start_state, frozenset(accept_states), rulebook)

    def new_dfa(self) -> DFA:
        return DFA(self.start_state, self.accept_states, self.rulebook)

    def accepts(self, text: str) -> bool:
        dfa = self.new_dfa()
        dfa.read_string(text)
        return dfa.accepting


@dataclass(slots=True)
class NFA:
    """
    A running nondeterministic automaton, created fresh for every match

    ``moving`` holds the states reached by the last character read, before free
    moves are followed. Acceptance and the next move are always computed from
    ``current_states``, the free closure of ``moving``.
    """

    moving: frozenset[State]
    accept_states: frozenset[State]
    rulebook: NFARulebook

    @property
    def current_states(self) -> frozenset[State]:
        return self.rulebook.free_closure(self.moving)

    @property
    def accepting(self) -> bool:
        return not self.accept_states.isdisjoint(self.current_states)

    def read_character(self, char: str) -> None:
        self.moving = self.rulebook.next_states(self.current_states, Char(char))

    def read_string(self, text: str) -> None:
        for char in text:
            self.read_character(char)


@dataclass(frozen=True, slots=True)
class NFADesign(DesignExportMixin):
    """Formally, an NFA is a 5-tuple (Q, Σ, q0, T, δ) where
        • Q is finite set of states;
        • Σ is alphabet of input symbols;
        • q0 is start state;
        • T is subset of Q giving the ``accept`` states;
        and
        • δ is the transition function.
    Now the transition function specifies a set of states rather than a state: it maps Q × Σ to { subsets of Q }.

    A design is immutable, every call to ``accepts`` runs on its own ``NFA``.

    Examples
    --------
    >>> design = NFADesign.from_rules(
    ...     1,
    ...     {4},
    ...     [(1, 'a', 1), (1, 'b', 1), (1, 'b', 2), (2, 'a', 3), (2, 'b', 3), (3, 'a', 4), (3, 'b', 4)],
    ... )
    >>> design.accepts('bab'), design.accepts('bbbbb'), design.accepts('bbabb')
    (True, True, False)
    """

    start_state: State
    accept_states: frozenset[State]
    rulebook: NFARulebook

    def __post_init__(self):
        object.__setattr__(self, "accept_states", frozenset(self.accept_states))

    @staticmethod
    def from_rules(
        start_state: State, accept_states: Iterable[State], rules: Iterable[Rule]
    ) -> "NFADesign":
        rulebook = NFARulebook.from_rules(rules)
        logger.debug("built an NFA design with %d rules", len(rulebook))
        return NFADesign(start_state, frozenset(accept_states), rulebook)

    def new_nfa(self) -> NFA:
        return NFA(frozenset({self.start_state}), self.accept_states, self.rulebook)

    def accepts(self, text: str) -> bool:
        nfa = self.new_nfa()
        nfa.read_string(text)
        return nfa.accepting

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(states={tuple(sorted(self.states()))}, "
            f"start_state={self.start_state}, "
            f"accept_states={tuple(sorted(self.accept_states))}, "
            f"transitions={list(self.rulebook)})"
        )


if __name__ == "__main__":
    import doctest

    doctest.testmod()
