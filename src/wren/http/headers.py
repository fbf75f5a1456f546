"""Immutable, case-insensitive HTTP request headers.

Built once per request from the ASGI scope's raw byte pairs. Names are
lowercased and decoded up front, since the reverse proxy walks every
header anyway. ``Mapping`` access returns the first value of a name;
``pairs`` keeps wire order and duplicates for forwarding.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers["Host"]`` is the first ``host`` value.
    ``pairs`` exposes repeated headers.
    """

    __slots__ = ("_first", "_pairs")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        pairs = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )
        first: dict[str, str] = {}
        for name, value in pairs:
            first.setdefault(name, value)
        self._pairs = pairs
        self._first = first

    def __getitem__(self, key: str) -> str:
        return self._first[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._first

    def __iter__(self) -> Iterator[str]:
        return iter(self._first)

    def __len__(self) -> int:
        return len(self._first)

    def __repr__(self) -> str:
        return f"Headers({self._pairs!r})"

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        """Every ``(name, value)`` pair in wire order, duplicates included."""
        return self._pairs

    def without(self, names: Iterable[str]) -> list[tuple[str, str]]:
        """Pairs whose name is not in *names* (compared lowercased)."""
        excluded = {name.lower() for name in names}
        return [(name, value) for name, value in self._pairs if name not in excluded]
