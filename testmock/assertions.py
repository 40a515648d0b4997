"""Assertions over a mock's invocation log.

Build predicates with `called()` and `never_called()`, then evaluate
them with `check_mock()`:

    >>> foo = create_mock(["lol", "wtf"])
    >>> _ = foo.lol(); _ = foo.lol()
    >>> [o.passed for o in check_mock(foo, [
    ...     called("lol", times=2),
    ...     never_called("wtf"),
    ... ])]
    [True, True]

`check_mock()` never raises for a failed predicate. Each predicate is
evaluated on its own and yields an `Outcome` with a diagnostic message,
leaving it to the test framework to report failures. `assert_mock()`
is the shortcut raising `AssertionError` when anything failed.
"""

import logging
import typing as t
from abc import abstractmethod

from .errors import MatcherError
from .history import Invocation
from .immutable import Immutable
from .matchers import ArgMatcher, to_matcher
from .mock import Mock, invocations

log = logging.getLogger(__name__)


class Outcome(t.NamedTuple):
    """The result of evaluating one predicate."""

    passed: bool
    message: str
    predicate: "Predicate"


class Predicate(Immutable):
    """A declarative assertion about calls to one method."""

    method: str
    matcher: ArgMatcher

    def __init__(self, method: str, with_: t.Any = None):
        if not isinstance(method, str) or not method:
            raise TypeError(
                f"Method name must be a non-empty string: {method!r}"
            )
        self.method = method
        self.constrained = with_ is not None
        self.matcher = to_matcher(with_)

    def matching(self, mock: Mock) -> t.List[Invocation]:
        """Return the mock's invocations this predicate counts."""
        return invocations(mock).entries_for(self.method, self.matcher)

    @abstractmethod
    def expectation(self) -> str:
        """Return the expected condition, in words."""

    @abstractmethod
    def evaluate(self, mock: Mock) -> Outcome:
        """Check the predicate against the mock's invocation log."""

    def describe(self) -> str:
        text = f"'{self.method}' {self.expectation()}"
        if self.constrained:
            text += f" with {self.matcher.describe()}"
        return text

    def _outcome(self, mock: Mock, passed: bool, count: int) -> Outcome:
        message = f"{self.describe()}: called {_times(count)}"
        descriptor = mock._mock_descriptor
        if not descriptor.is_declared(self.method):
            message += f" ({descriptor.name} does not declare it)"
        return Outcome(passed, message, self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.describe()})"


class Called(Predicate):
    """The method was called, optionally an exact number of times."""

    def __init__(
        self, method: str, times: t.Optional[int] = None, with_: t.Any = None
    ):
        if times is not None:
            if isinstance(times, bool) or not isinstance(times, int):
                raise TypeError(f"times must be an integer, got {times!r}")
            if times < 0:
                raise ValueError(f"times must not be negative, got {times}")
        super().__init__(method, with_)
        self.times = times

    def expectation(self) -> str:
        if self.times is None:
            return "called at least once"
        return f"called {_times(self.times)}"

    def evaluate(self, mock: Mock) -> Outcome:
        count = len(self.matching(mock))
        if self.times is None:
            passed = count > 0
        else:
            passed = count == self.times
        return self._outcome(mock, passed, count)


class NeverCalled(Predicate):
    """The method was never called (with matching arguments)."""

    def expectation(self) -> str:
        return "never called"

    def evaluate(self, mock: Mock) -> Outcome:
        count = len(self.matching(mock))
        return self._outcome(mock, count == 0, count)


def called(
    method: str, times: t.Optional[int] = None, with_: t.Any = None
) -> Called:
    """Expect `method` to have been called.

    :param times: the exact number of matching calls expected; if not
        given, at least one is
    :param with_: restrict the calls counted to those whose arguments
        match; anything `to_matcher()` accepts
    """
    return Called(method, times=times, with_=with_)


def never_called(method: str, with_: t.Any = None) -> NeverCalled:
    """Expect no call of `method` (whose arguments match `with_`)."""
    return NeverCalled(method, with_=with_)


def check_mock(
    mock: Mock, predicates: t.Iterable[Predicate]
) -> t.List[Outcome]:
    """Evaluate every predicate against the mock, in order.

    A predicate whose matcher raises is reported as failed; the others
    are still evaluated.
    """
    if not isinstance(mock, Mock):
        raise TypeError(f"{mock!r} is not a mock")
    outcomes = []
    for predicate in predicates:
        if not isinstance(predicate, Predicate):
            raise TypeError(f"{predicate!r} is not a predicate")
        try:
            outcome = predicate.evaluate(mock)
        except MatcherError as exc:
            log.warning("Could not evaluate %r: %s", predicate, exc)
            message = f"{predicate.describe()}: matcher failed: {exc}"
            outcome = Outcome(False, message, predicate)
        log.debug(
            "%s %s", "PASS" if outcome.passed else "FAIL", outcome.message
        )
        outcomes.append(outcome)
    return outcomes


def assert_mock(mock: Mock, *predicates: Predicate) -> t.List[Outcome]:
    """Check the predicates and raise `AssertionError` if any failed."""
    outcomes = check_mock(mock, predicates)
    failures = [o.message for o in outcomes if not o.passed]
    if failures:
        raise AssertionError(
            f"{len(failures)} of {len(outcomes)} mock check(s) failed on "
            f"{mock!r}:\n" + "\n".join(f"  - {m}" for m in failures)
        )
    return outcomes


def _times(count: int) -> str:
    return "1 time" if count == 1 else f"{count} times"
