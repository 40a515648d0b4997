"""The per-mock record of invocations."""

import itertools
import logging
import threading
import typing as t

from .capture import Capture
from .immutable import Immutable
from .matchers import AnyArgs, ArgMatcher

log = logging.getLogger(__name__)


class Invocation(Immutable):
    """One recorded method call."""

    def __init__(self, method: str, args: Capture, sequence: int):
        self.method = method
        self.args = args
        self.sequence = sequence

    def __repr__(self) -> str:
        call = f"{self.method}({self.args.signature()})"
        return f"Invocation(#{self.sequence} {call})"

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, Invocation):
            return NotImplemented
        return (self.method, self.args, self.sequence) == (
            other.method,
            other.args,
            other.sequence,
        )

    def __hash__(self) -> int:
        return hash((self.method, self.sequence))


class InvocationLog:
    """An append-only, ordered list of invocations.

    `record()` is safe to call from several threads at once: sequence
    numbers are handed out and entries appended under one lock, so no
    two invocations share a number and entries always appear in
    sequence order. Readers get snapshots.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._entries: t.List[Invocation] = []

    def record(self, method: str, args: Capture) -> Invocation:
        """Append an invocation of `method` and return it."""
        with self._lock:
            invocation = Invocation(method, args, next(self._sequence))
            self._entries.append(invocation)
        log.debug("Recorded %r", invocation)
        return invocation

    def entries(self) -> t.List[Invocation]:
        """Return a snapshot of every invocation, in sequence order."""
        with self._lock:
            return list(self._entries)

    def entries_for(
        self, method: str, matcher: t.Optional[ArgMatcher] = None
    ) -> t.List[Invocation]:
        """Return invocations of `method` whose arguments satisfy `matcher`.

        Without a matcher every invocation of `method` is returned. Any
        `MatcherError` raised by the matcher propagates.
        """
        matcher = matcher or AnyArgs()
        return [
            inv
            for inv in self.entries()
            if inv.method == method and matcher.matches(inv.args)
        ]

    def methods(self) -> t.List[str]:
        """Return the names of invoked methods, in order of first call."""
        return list(dict.fromkeys(inv.method for inv in self.entries()))

    def __iter__(self) -> t.Iterator[Invocation]:
        return iter(self.entries())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __getitem__(self, index: int) -> Invocation:
        with self._lock:
            return self._entries[index]

    def __repr__(self) -> str:
        return f"InvocationLog({len(self)} invocations)"
