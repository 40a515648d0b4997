"""Captured call arguments."""

import itertools
import typing as t
from types import MappingProxyType

from .immutable import Immutable


class Capture(Immutable):
    """The positional and named arguments of one call.

    Two captures are equal when their positional values are equal in
    order and length, and their named values are equal irrespective of
    order. Values are compared with `==`, so containers compare
    structurally.

    Only the capture itself is frozen. The values are the caller's own
    objects, held by reference; a list mutated after the call shows the
    mutation in the capture too. Pass copies where that matters.

    >>> Capture(1, 2, colour="red")
    Capture(1, 2, colour='red')
    >>> Capture(1, b=2, a=1) == Capture(1, a=1, b=2)
    True
    """

    def __init__(self, *args: t.Any, **kwargs: t.Any):
        self.args: t.Tuple[t.Any, ...] = args
        self.kwargs: t.Mapping[str, t.Any] = MappingProxyType(dict(kwargs))

    @classmethod
    def from_parts(
        cls,
        args: t.Iterable[t.Any] = (),
        kwargs: t.Optional[t.Mapping[str, t.Any]] = None,
    ) -> "Capture":
        """Build a capture from an args sequence and a kwargs mapping."""
        return cls(*args, **(kwargs or {}))

    def __repr__(self) -> str:
        return f"Capture({self.signature()})"

    def signature(self) -> str:
        """Return the arguments as they would be written in a call."""
        return ", ".join(
            itertools.chain(
                (repr(a) for a in self.args),
                (f"{k}={v!r}" for k, v in self.kwargs.items()),
            )
        )

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, Capture):
            return NotImplemented
        return self.args == other.args and dict(self.kwargs) == dict(
            other.kwargs
        )

    def __hash__(self) -> int:
        return hash((self.args, frozenset(self.kwargs.items())))

    def __getitem__(self, key: t.Union[int, str]) -> t.Any:
        """Return a positional value by index, or a named value by name."""
        if isinstance(key, str):
            return self.kwargs[key]
        return self.args[key]

    def __contains__(self, name: str) -> bool:
        """Return whether a named value was passed."""
        return name in self.kwargs

    def get(self, name: str, default: t.Any = None) -> t.Any:
        """Return a named value, or `default` if it wasn't passed."""
        return self.kwargs.get(name, default)
