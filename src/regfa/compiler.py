import logging
from typing import Optional

from regfa.fsm import NFADesign
from regfa.pattern import (
    Choose,
    Concatenate,
    Empty,
    Literal,
    Pattern,
    PatternVisitor,
    Repeat,
)
from regfa.rulebook import NFARulebook, Rule
from regfa.symbols import EPSILON, Char
from regfa.utils import State, StateAllocator, default_allocator

logger = logging.getLogger(__name__)


def _free_moves(sources, target: State) -> NFARulebook:
    return NFARulebook.from_rules(Rule(source, EPSILON, target) for source in sources)


class ThompsonCompiler(PatternVisitor[NFADesign]):
    """
    Compiles a pattern tree into an NFA design by structural recursion

    Each child is compiled on its own and the resulting fragments are glued
    together with free moves. All states come from one allocator, so the
    rulebooks of sibling fragments never share a state.

    Examples
    --------
    >>> from regfa.utils import StateAllocator
    >>> design = ThompsonCompiler(StateAllocator()).compile(Concatenate(Literal('a'), Literal('b')))
    >>> design
    NFADesign(states=(0, 1, 2, 3), start_state=0, accept_states=(3,), transitions=[0 --a--> 1, 2 --b--> 3, 1 --ε--> 2])
    >>> design.accepts('ab'), design.accepts('a')
    (True, False)
    """

    def __init__(self, allocator: Optional[StateAllocator] = None):
        self.allocator = default_allocator if allocator is None else allocator

    def compile(self, pattern: Pattern) -> NFADesign:
        design = pattern.accept(self)
        logger.debug(
            "compiled %r into %d states and %d rules",
            pattern.to_string(),
            len(design.states()),
            len(design.rulebook),
        )
        return design

    def visit_empty(self, empty: Empty) -> NFADesign:
        state = self.allocator.fresh()
        return NFADesign(state, frozenset({state}), NFARulebook())

    def visit_literal(self, literal: Literal) -> NFADesign:
        start, accept = self.allocator.fresh(), self.allocator.fresh()
        return NFADesign(
            start,
            frozenset({accept}),
            NFARulebook.from_rules([Rule(start, Char(literal.char), accept)]),
        )

    def visit_concatenate(self, concatenate: Concatenate) -> NFADesign:
        first = concatenate.first.accept(self)
        second = concatenate.second.accept(self)

        # every way of finishing `first` continues into `second` for free
        rulebook = first.rulebook.merge(second.rulebook).merge(
            _free_moves(first.accept_states, second.start_state)
        )
        return NFADesign(first.start_state, second.accept_states, rulebook)

    def visit_choose(self, choose: Choose) -> NFADesign:
        first = choose.first.accept(self)
        second = choose.second.accept(self)
        start = self.allocator.fresh()

        rulebook = first.rulebook.merge(second.rulebook).merge(
            NFARulebook.from_rules(
                [
                    Rule(start, EPSILON, first.start_state),
                    Rule(start, EPSILON, second.start_state),
                ]
            )
        )
        return NFADesign(start, first.accept_states | second.accept_states, rulebook)

    def visit_repeat(self, repeat: Repeat) -> NFADesign:
        body = repeat.pattern.accept(self)
        start = self.allocator.fresh()

        # `start` accepts zero repetitions, the loop back allows any number of them
        rulebook = (
            body.rulebook.merge(_free_moves([start], body.start_state))
            .merge(_free_moves(body.accept_states, body.start_state))
        )
        return NFADesign(start, body.accept_states | {start}, rulebook)


def compile_pattern(
    pattern: Pattern, allocator: Optional[StateAllocator] = None
) -> NFADesign:
    return ThompsonCompiler(allocator).compile(pattern)
