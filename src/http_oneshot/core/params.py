"""Query string builder (URLSearchParams)."""

from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

PairsLike = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _stringify(value: Any) -> str:
    """Stringify a value the way URLSearchParams does."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class Params:
    """
    Ordered multiset of name/value pairs for query strings and form bodies.

    Names are not unique: appending the same name twice yields two pairs.
    Serialization uses ``application/x-www-form-urlencoded`` rules, so a
    space becomes ``+``.

    Not thread-safe; owned by one thread.

    Example:
        >>> params = Params()
        >>> params.append("a", 1)
        >>> params.append("b", "2 3")
        >>> str(params)
        'a=1&b=2+3'
    """

    def __init__(self, init: Optional[PairsLike] = None):
        self._pairs: List[Tuple[str, str]] = []
        if init is None:
            return
        items = init.items() if isinstance(init, Mapping) else init
        for name, value in items:
            self.append(name, value)

    def append(self, name: str, value: Any) -> None:
        """Add one pair at the end."""
        self._pairs.append((str(name), _stringify(value)))

    def get(self, name: str) -> Optional[str]:
        """First value for ``name`` or None."""
        for key, value in self._pairs:
            if key == name:
                return value
        return None

    def get_all(self, name: str) -> List[str]:
        """All values for ``name`` in insertion order."""
        return [value for key, value in self._pairs if key == name]

    def to_string(self) -> str:
        """Percent-encoded query string, without a leading ``?``."""
        return urlencode(self._pairs)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Params({self._pairs!r})"

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Params):
            return NotImplemented
        return self._pairs == other._pairs
