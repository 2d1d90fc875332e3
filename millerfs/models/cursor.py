from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class Cursor(Generic[T]):
    """An ordered, immutable sequence with a wrap-around selection.

    ``index`` is ``None`` exactly when the sequence is empty; otherwise it always
    points at a valid item.
    """

    __slots__ = ("_items", "_index")

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: tuple[T, ...] = tuple(items)
        self._index: int | None = 0 if self._items else None

    @classmethod
    def with_items(cls, items: Iterable[T]) -> Cursor[T]:
        return cls(items)

    @property
    def items(self) -> Sequence[T]:
        return self._items

    @property
    def index(self) -> int | None:
        return self._index

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def select(self, index: int | None) -> int | None:
        if not self._items:
            self._index = None
        elif index is None:
            self._index = 0
        else:
            self._index = max(0, min(index, len(self._items) - 1))
        return self._index

    def next(self) -> int | None:
        if self._index is None:
            return None
        self._index = (self._index + 1) % len(self._items)
        return self._index

    def previous(self) -> int | None:
        if self._index is None:
            return None
        self._index = (self._index - 1) % len(self._items)
        return self._index

    def current(self) -> T | None:
        if self._index is None:
            return None
        return self._items[self._index]
