"""
Views - Read-only snapshots of internal tables.

Snapshots copy the owner's table when taken, so later mutations of the
owner are not visible through them. Any attempt to mutate a snapshot
raises UnmodifiableViewError.
"""

from collections.abc import Iterator, Mapping
from typing import Any, Generic, NoReturn, TypeVar

from hubnet.errors import UnmodifiableViewError

K = TypeVar("K")
V = TypeVar("V")


class ReadOnlyMapping(Mapping, Generic[K, V]):
    """Immutable mapping snapshot."""

    __slots__ = ("_data",)

    def __init__(self, source: Mapping[K, V] | None = None):
        self._data: dict[K, V] = dict(source or {})

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ReadOnlyMapping({self._data!r})"

    def __setitem__(self, key: Any, value: Any) -> NoReturn:
        raise UnmodifiableViewError("item assignment")

    def __delitem__(self, key: Any) -> NoReturn:
        raise UnmodifiableViewError("item deletion")

    def pop(self, *args: Any) -> NoReturn:
        raise UnmodifiableViewError("pop")

    def popitem(self) -> NoReturn:
        raise UnmodifiableViewError("popitem")

    def clear(self) -> NoReturn:
        raise UnmodifiableViewError("clear")

    def update(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise UnmodifiableViewError("update")

    def setdefault(self, *args: Any) -> NoReturn:
        raise UnmodifiableViewError("setdefault")
