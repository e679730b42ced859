import re
from abc import ABC, ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from regfa.fsm import NFADesign
    from regfa.utils import StateAllocator

V = TypeVar("V")

# binding strength used only when printing, lowest binds loosest
CHOOSE_PRECEDENCE = 0
CONCATENATE_PRECEDENCE = 1
REPEAT_PRECEDENCE = 2
ATOM_PRECEDENCE = 3


class Pattern(ABC):
    """
    Base class of the pattern tree

    A tree is built once, never mutated and owns its children outright.
    """

    __slots__ = ()

    # finds upper case letters which are not at the beginning of a string
    _camel_boundary = re.compile(r"(?<!^)(?=[A-Z])")

    precedence: int

    def accept(self, visitor: "PatternVisitor[V]") -> V:
        """
        This is the acceptor of an instance of PatternVisitor
        Works by finding the appropriate method in the visitor.

        The appropriate visit method for a class X is `visit_ + to_snake_case(X)`

        Examples
        --------
        >>> class Counter(PatternVisitor[int]):
        ...     def visit_empty(self, empty): return 0
        ...     def visit_literal(self, literal): return 1
        ...     def visit_concatenate(self, node): return node.first.accept(self) + node.second.accept(self)
        ...     visit_choose = visit_concatenate
        ...     def visit_repeat(self, repeat): return repeat.pattern.accept(self)
        >>> Repeat(Choose(Literal('a'), Concatenate(Literal('b'), Empty()))).accept(Counter())
        2
        """
        method_name = (
            f"visit_{self._camel_boundary.sub('_', self.__class__.__name__).lower()}"
        )
        visit_method = getattr(visitor, method_name)
        return visit_method(self)

    @abstractmethod
    def to_string(self) -> str:
        """
        Renders the pattern with the fewest parentheses its precedence allows
        """
        ...

    def bracket(self, outer_precedence: int) -> str:
        if self.precedence < outer_precedence:
            return f"({self.to_string()})"
        return self.to_string()

    def __str__(self):
        return self.to_string()

    def to_nfa_design(self, allocator: Optional["StateAllocator"] = None) -> "NFADesign":
        from regfa.compiler import compile_pattern

        return compile_pattern(self, allocator)

    def matches(self, text: str) -> bool:
        """
        Examples
        --------
        >>> Repeat(Literal('a')).matches('aaa')
        True
        >>> Literal('a').matches('b')
        False
        """
        return self.to_nfa_design().accepts(text)


@dataclass(frozen=True, slots=True)
class Empty(Pattern):
    """Matches only the empty string"""

    precedence = ATOM_PRECEDENCE

    def to_string(self) -> str:
        return ""


@dataclass(frozen=True, slots=True)
class Literal(Pattern):
    char: str

    precedence = ATOM_PRECEDENCE

    def __post_init__(self):
        if not isinstance(self.char, str) or len(self.char) != 1:
            raise ValueError(f"a literal is a single character, got {self.char!r}")

    def to_string(self) -> str:
        return self.char


@dataclass(frozen=True, slots=True)
class Concatenate(Pattern):
    first: Pattern
    second: Pattern

    precedence = CONCATENATE_PRECEDENCE

    def to_string(self) -> str:
        return "".join(
            pattern.bracket(self.precedence) for pattern in (self.first, self.second)
        )


@dataclass(frozen=True, slots=True)
class Choose(Pattern):
    first: Pattern
    second: Pattern

    precedence = CHOOSE_PRECEDENCE

    def to_string(self) -> str:
        return "|".join(
            pattern.bracket(self.precedence) for pattern in (self.first, self.second)
        )


@dataclass(frozen=True, slots=True)
class Repeat(Pattern):
    """Kleene star, zero or more repetitions of ``pattern``"""

    pattern: Pattern

    precedence = REPEAT_PRECEDENCE

    def to_string(self) -> str:
        return f"{self.pattern.bracket(self.precedence)}*"


def render(pattern: Pattern) -> str:
    """
    Examples
    --------
    >>> render(Repeat(Choose(Concatenate(Literal('a'), Literal('b')), Literal('a'))))
    '(ab|a)*'
    >>> render(Concatenate(Choose(Literal('a'), Literal('b')), Repeat(Literal('c'))))
    '(a|b)c*'
    """
    return pattern.to_string()


class PatternVisitor(Generic[V], metaclass=ABCMeta):
    """
    A visitor has one method per pattern variant, a subclass that leaves one of
    them out cannot be instantiated
    """

    @abstractmethod
    def visit_empty(self, empty: Empty) -> V:
        ...

    @abstractmethod
    def visit_literal(self, literal: Literal) -> V:
        ...

    @abstractmethod
    def visit_concatenate(self, concatenate: Concatenate) -> V:
        ...

    @abstractmethod
    def visit_choose(self, choose: Choose) -> V:
        ...

    @abstractmethod
    def visit_repeat(self, repeat: Repeat) -> V:
        ...


if __name__ == "__main__":
    import doctest

    doctest.testmod()
