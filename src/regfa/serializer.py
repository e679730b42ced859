import json
from typing import Any

from regfa.pattern import (
    Choose,
    Concatenate,
    Empty,
    Literal,
    Pattern,
    PatternVisitor,
    Repeat,
)


class PatternDecodeError(ValueError):
    ...


class PatternEncoder(PatternVisitor[Any]):
    """
    Turns a pattern tree into plain JSON compatible objects

        Empty              -> None
        Literal(c)         -> "c"
        Concatenate(a, b)  -> {"concatenate": [a, b]}
        Choose(a, b)       -> {"choose": [a, b]}
        Repeat(a)          -> {"repeat": a}
    """

    def visit_empty(self, empty: Empty) -> Any:
        return None

    def visit_literal(self, literal: Literal) -> Any:
        return literal.char

    def visit_concatenate(self, concatenate: Concatenate) -> Any:
        return {
            "concatenate": [
                concatenate.first.accept(self),
                concatenate.second.accept(self),
            ]
        }

    def visit_choose(self, choose: Choose) -> Any:
        return {"choose": [choose.first.accept(self), choose.second.accept(self)]}

    def visit_repeat(self, repeat: Repeat) -> Any:
        return {"repeat": repeat.pattern.accept(self)}


def to_obj(pattern: Pattern) -> Any:
    return pattern.accept(PatternEncoder())


def from_obj(obj: Any) -> Pattern:
    """
    Rebuild a pattern tree from the objects produced by ``to_obj``

    Examples
    --------
    >>> from_obj({"repeat": {"choose": [{"concatenate": ["a", "b"]}, "a"]}})
    Repeat(pattern=Choose(first=Concatenate(first=Literal(char='a'), second=Literal(char='b')), second=Literal(char='a')))
    >>> from_obj("")
    Empty()
    >>> from_obj("ab")
    Traceback (most recent call last):
        ...
    regfa.serializer.PatternDecodeError: cannot decode a pattern from 'ab'
    """
    match obj:
        case None | "":
            return Empty()
        case str() if len(obj) == 1:
            return Literal(obj)
        case {"concatenate": [first, second], **rest} if not rest:
            return Concatenate(from_obj(first), from_obj(second))
        case {"choose": [first, second], **rest} if not rest:
            return Choose(from_obj(first), from_obj(second))
        case {"repeat": pattern, **rest} if not rest:
            return Repeat(from_obj(pattern))
        case _:
            raise PatternDecodeError(f"cannot decode a pattern from {obj!r}")


def loads(text: str) -> Pattern:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise PatternDecodeError(f"invalid JSON: {e}") from e
    return from_obj(obj)


def dumps(pattern: Pattern) -> str:
    return json.dumps(to_obj(pattern))


if __name__ == "__main__":
    import doctest

    doctest.testmod()
