from itertools import count
from threading import Lock
from typing import Iterator

State = int


class StateAllocator:
    """
    Hands out state identities that are never reused

    Every fragment compiled with the same allocator gets states that are distinct
    from the states of every other fragment, so independently compiled rulebooks
    can always be merged without aliasing.

    Examples
    --------
    >>> allocator = StateAllocator()
    >>> allocator.fresh(), allocator.fresh(), allocator()
    (0, 1, 2)
    """

    __slots__ = ("_counter", "_lock")

    def __init__(self, start: int = 0):
        self._counter: Iterator[int] = count(start)
        self._lock = Lock()

    def fresh(self) -> State:
        with self._lock:
            return next(self._counter)

    __call__ = fresh

    def __repr__(self):
        return f"{self.__class__.__name__}()"


# the only piece of process-wide mutable state in the package
default_allocator = StateAllocator()


def gen_state() -> State:
    return default_allocator.fresh()
