from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Char:
    """A single concrete input character"""

    char: str

    def __post_init__(self):
        if not isinstance(self.char, str) or len(self.char) != 1:
            raise ValueError(f"expected a single character, got {self.char!r}")

    def __repr__(self):
        return f"{self.char}"


@dataclass(frozen=True, slots=True)
class Free:
    """
    Labels a move the automaton can take without consuming input

    All instances compare equal, use the module level ``EPSILON``.
    """

    def __repr__(self):
        return "ε"


EPSILON = Free()

Symbol = Union[Char, Free]


def as_symbol(symbol: Symbol | str | None) -> Symbol:
    """
    Promote a plain character to a ``Char``, ``None`` means a free move

    Examples
    --------
    >>> as_symbol('a')
    a
    >>> as_symbol(None)
    ε
    >>> as_symbol(EPSILON) is EPSILON
    True
    """
    if symbol is None:
        return EPSILON
    if isinstance(symbol, str):
        return Char(symbol)
    return symbol
