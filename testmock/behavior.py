"""Per-method response strategies."""

import typing as t
from abc import abstractmethod
from types import MappingProxyType

from .capture import Capture
from .const import UNSET
from .immutable import Immutable


class Behavior(Immutable):
    """How a mocked method responds once its call has been recorded."""

    @abstractmethod
    def respond(self, capture: Capture) -> t.Any:
        """Return the call's result, or raise its failure."""


class Default(Behavior):
    """Record the call and return a stub value."""

    def __init__(self, value: t.Any = UNSET):
        self.value = value

    def respond(self, capture: Capture) -> t.Any:
        return self.value

    def __repr__(self) -> str:
        if self.value is UNSET:
            return "Default()"
        return f"Default({self.value!r})"


class FixedValue(Behavior):
    """Return the same value whatever the arguments."""

    def __init__(self, value: t.Any):
        self.value = value

    def respond(self, capture: Capture) -> t.Any:
        return self.value

    def __repr__(self) -> str:
        return f"FixedValue({self.value!r})"


class Computed(Behavior):
    """Call a zero-argument function afresh on every call."""

    def __init__(self, func: t.Callable[[], t.Any]):
        self.func = func

    def respond(self, capture: Capture) -> t.Any:
        return self.func()

    def __repr__(self) -> str:
        return f"Computed({self.func!r})"


class Overriding(Behavior):
    """Call a function with the call's own arguments."""

    def __init__(self, func: t.Callable[..., t.Any]):
        self.func = func

    def respond(self, capture: Capture) -> t.Any:
        return self.func(*capture.args, **capture.kwargs)

    def __repr__(self) -> str:
        return f"Overriding({self.func!r})"


class BehaviorTable(Immutable):
    """A read-only mapping of method names to behaviors.

    Declared methods with no entry get the table's default behavior.
    """

    def __init__(
        self,
        entries: t.Mapping[str, Behavior],
        default: t.Optional[Behavior] = None,
    ):
        self.entries: t.Mapping[str, Behavior] = MappingProxyType(
            dict(entries)
        )
        self.default = default or Default()

    def lookup(self, method: str) -> Behavior:
        """Return the behavior configured for `method`."""
        return self.entries.get(method, self.default)

    def __contains__(self, method: str) -> bool:
        return method in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"BehaviorTable({dict(self.entries)!r})"
