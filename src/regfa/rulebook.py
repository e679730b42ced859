import logging
from dataclasses import dataclass, field
from functools import reduce
from operator import itemgetter
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional

from more_itertools import map_reduce

from regfa.symbols import EPSILON, Char, Symbol, as_symbol
from regfa.utils import State

logger = logging.getLogger(__name__)


class UndefinedTransition(Exception):
    """Raised when a deterministic rulebook has no rule for a (state, symbol) pair"""

    def __init__(self, state: State, symbol: Symbol):
        super().__init__(f"no rule for state {state} on {symbol!r}")
        self.state = state
        self.symbol = symbol


class Rule(NamedTuple):
    state: State
    symbol: Symbol
    target: State

    def __repr__(self):
        return f"{self.state} --{self.symbol!r}--> {self.target}"


def rule(state: State, char: Optional[str], target: State) -> Rule:
    """
    Shorthand for building a rule from a plain character

    Examples
    --------
    >>> rule(1, 'a', 2)
    1 --a--> 2
    >>> rule(1, None, 2)
    1 --ε--> 2
    """
    return Rule(state, as_symbol(char), target)


def _states(rules: list[Rule]) -> frozenset[State]:
    return frozenset(r.state for r in rules) | frozenset(r.target for r in rules)


def _alphabet(rules: Iterable[Rule]) -> frozenset[Char]:
    return frozenset(r.symbol for r in rules if r.symbol != EPSILON)


@dataclass(frozen=True, slots=True)
class DFARulebook:
    """
    Deterministic transition function, each (state, symbol) pair has one target

    Examples
    --------
    >>> rulebook = DFARulebook.from_rules([rule(1, 'a', 2), rule(2, 'b', 1)])
    >>> rulebook.next_state(1, 'a')
    2
    >>> rulebook.next_state(1, 'b')
    Traceback (most recent call last):
        ...
    regfa.rulebook.UndefinedTransition: no rule for state 1 on b
    """

    mapping: Mapping[tuple[State, Symbol], State] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @staticmethod
    def from_rules(rules: Iterable[Rule]) -> "DFARulebook":
        mapping: dict[tuple[State, Symbol], State] = {}
        for state, symbol, target in rules:
            key = (state, as_symbol(symbol))
            if key in mapping and mapping[key] != target:
                # last rule wins
                logger.warning(
                    "conflicting rules for state %s on %r: %s replaces %s",
                    state,
                    key[1],
                    target,
                    mapping[key],
                )
            mapping[key] = target
        return DFARulebook(MappingProxyType(mapping))

    def next_state(self, state: State, symbol: Symbol | str) -> State:
        symbol = as_symbol(symbol)
        try:
            return self.mapping[state, symbol]
        except KeyError:
            raise UndefinedTransition(state, symbol) from None

    def merge(self, other: "DFARulebook") -> "DFARulebook":
        """Union of both rule sets, on a colliding key the rule of ``self`` is kept"""
        return DFARulebook(MappingProxyType({**other.mapping, **self.mapping}))

    def states(self) -> frozenset[State]:
        return _states(list(self))

    def alphabet(self) -> frozenset[Char]:
        return _alphabet(self)

    def __iter__(self) -> Iterator[Rule]:
        for (state, symbol), target in self.mapping.items():
            yield Rule(state, symbol, target)

    def __len__(self):
        return len(self.mapping)


@dataclass(frozen=True, slots=True)
class NFARulebook:
    """
    Nondeterministic transition function, maps Q × Σ to subsets of Q

    A missing rule is a dead end and contributes the empty set.

    Examples
    --------
    >>> rulebook = NFARulebook.from_rules(
    ...     [rule(1, 'a', 1), rule(1, 'b', 1), rule(1, 'b', 2), rule(2, 'a', 3)]
    ... )
    >>> sorted(rulebook.next_states({1}, 'b'))
    [1, 2]
    >>> sorted(rulebook.next_states({2}, 'b'))
    []
    """

    mapping: Mapping[tuple[State, Symbol], frozenset[State]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @staticmethod
    def from_rules(rules: Iterable[Rule]) -> "NFARulebook":
        mapping = map_reduce(
            (Rule(state, as_symbol(symbol), target) for state, symbol, target in rules),
            keyfunc=itemgetter(0, 1),
            valuefunc=itemgetter(2),
            reducefunc=frozenset,
        )
        return NFARulebook(MappingProxyType(dict(mapping)))

    def follow(self, state: State, symbol: Symbol | str) -> frozenset[State]:
        return self.mapping.get((state, as_symbol(symbol)), frozenset())

    def next_states(
        self, states: Iterable[State], symbol: Symbol | str
    ) -> frozenset[State]:
        symbol = as_symbol(symbol)
        return reduce(
            frozenset.union,
            (self.follow(state, symbol) for state in states),
            frozenset(),
        )

    def free_closure(self, states: Iterable[State]) -> frozenset[State]:
        """
        The set of states reachable from ``states`` by following free moves only

        The result always contains ``states`` themselves, so the closure is idempotent.
        This is done here using a depth first search
        """

        seen: set[State] = set()
        stack = list(states)

        while stack:
            if (state := stack.pop()) in seen:
                continue

            seen.add(state)
            stack.extend(self.follow(state, EPSILON))

        return frozenset(seen)

    def merge(self, other: "NFARulebook") -> "NFARulebook":
        """
        Union of both rule sets

        Fragments built with a shared allocator never share a key unless glue rules
        are being added to an existing state, in which case the targets accumulate.
        """
        mapping = dict(self.mapping)
        for key, targets in other.mapping.items():
            mapping[key] = mapping.get(key, frozenset()) | targets
        return NFARulebook(MappingProxyType(mapping))

    def states(self) -> frozenset[State]:
        return _states(list(self))

    def alphabet(self) -> frozenset[Char]:
        return _alphabet(self)

    def __iter__(self) -> Iterator[Rule]:
        for (state, symbol), targets in self.mapping.items():
            for target in sorted(targets):
                yield Rule(state, symbol, target)

    def __len__(self):
        return sum(map(len, self.mapping.values()))
