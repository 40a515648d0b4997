"""Mock construction and call interception.

`create_mock()` validates a configuration against a type descriptor and
returns a `Mock`. Every call made on the mock goes through `invoke()`,
which records the call before running the configured behavior:

    >>> pub = create_mock(["order_beer"], returning={"order_beer": "cheers"})
    >>> pub.order_beer(2)
    'cheers'
    >>> invocations(pub)[0]
    Invocation(#1 order_beer(2))
"""

import logging
import typing as t

from .behavior import (
    BehaviorTable,
    Computed,
    Default,
    FixedValue,
    Overriding,
)
from .capture import Capture
from .config import MockConfig
from .descriptor import ITypeDescriptor, as_descriptor
from .errors import (
    DuplicateBehaviorError,
    UndefinedMethodError,
    UnknownMethodError,
)
from .history import InvocationLog

log = logging.getLogger(__name__)


class Mock:
    """A stand-in for a declared type.

    Any method the type declares can be called, with any arguments.
    Asking for anything else raises `UndefinedMethodError`, which is an
    `AttributeError`, just as the real object would.

    The mock's own state lives in `_mock_*` slots; use `invocations()`
    to read its log.
    """

    __slots__ = ("_mock_descriptor", "_mock_behaviors", "_mock_log")

    def __init__(
        self,
        descriptor: ITypeDescriptor,
        behaviors: BehaviorTable,
        invocation_log: t.Optional[InvocationLog] = None,
    ):
        self._mock_descriptor = descriptor
        self._mock_behaviors = behaviors
        if invocation_log is None:
            invocation_log = InvocationLog()
        self._mock_log = invocation_log

    def __getattr__(self, name: str) -> "MockMethod":
        if name.startswith("_mock_"):
            raise AttributeError(name)
        descriptor = self._mock_descriptor
        if not descriptor.is_declared(name):
            raise UndefinedMethodError(name, descriptor.name)
        return MockMethod(self, name)

    @property  # type: ignore
    def __class__(self) -> type:
        """Report the mocked class, so `isinstance()` checks pass."""
        return self._mock_descriptor.mocked_class or type(self)

    def __repr__(self) -> str:
        return f"<Mock of {self._mock_descriptor.name}>"


class MockMethod:
    """A method looked up on a mock, bound to its name."""

    __slots__ = ("mock", "name")

    def __init__(self, mock: Mock, name: str):
        self.mock = mock
        self.name = name

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        return invoke(self.mock, self.name, Capture(*args, **kwargs))

    def __repr__(self) -> str:
        return f"<mocked method {self.mock._mock_descriptor.name}.{self.name}>"


def invoke(mock: Mock, method: str, capture: Capture) -> t.Any:
    """Call `method` on `mock` with the captured arguments.

    The call is recorded before its behavior runs, so a behavior that
    raises still leaves its call in the log. Calls to undeclared methods
    raise `UndefinedMethodError` and are not recorded.
    """
    if not isinstance(capture, Capture):
        raise TypeError(f"Expected a Capture, got {capture!r}")
    descriptor = mock._mock_descriptor
    if not descriptor.is_declared(method):
        log.debug("Refused call to undeclared %s.%s", descriptor.name, method)
        raise UndefinedMethodError(method, descriptor.name)
    mock._mock_log.record(method, capture)
    return mock._mock_behaviors.lookup(method).respond(capture)


def invocations(mock: Mock) -> InvocationLog:
    """Return the mock's invocation log."""
    return mock._mock_log


def build_behavior_table(
    descriptor: ITypeDescriptor, config: MockConfig
) -> BehaviorTable:
    """Validate a config against a type and build its behavior table."""
    categories: t.Dict[str, t.List[str]] = {}
    for category, mapping in config.categories():
        for method in mapping:
            categories.setdefault(method, []).append(category)

    for method, found_in in categories.items():
        if len(found_in) > 1:
            raise DuplicateBehaviorError(method, found_in)
    for method in categories:
        if not descriptor.is_declared(method):
            raise UnknownMethodError(method, descriptor.name)

    entries = {m: FixedValue(v) for m, v in config.returning.items()}
    callables = ((Computed, config.computing), (Overriding, config.overriding))
    for kind, mapping in callables:
        for method, func in mapping.items():
            if not callable(func):
                raise TypeError(
                    f"Behavior for '{method}' must be callable, got {func!r}"
                )
            entries[method] = kind(func)
    return BehaviorTable(entries, Default(config.default_return))


def create_mock(
    described: t.Union[ITypeDescriptor, type, t.Iterable[str]],
    config: t.Optional[MockConfig] = None,
    **overrides: t.Any,
) -> Mock:
    """Create a mock of a type.

    :param described: a type descriptor, a class, or an iterable of
        declared method names
    :param config: the behaviors to configure; keyword overrides
        (`returning`, `computing`, `overriding`, `default_return`) are
        applied on top of it
    :raises DuplicateBehaviorError: a method is configured twice
    :raises UnknownMethodError: a configured method isn't declared
    """
    descriptor = as_descriptor(described)
    if config is None:
        config = MockConfig()
    if overrides:
        config = config.with_updates(**overrides)

    behaviors = build_behavior_table(descriptor, config)
    log.debug(
        "Created mock of %s with %d configured behavior(s)",
        descriptor.name,
        len(behaviors),
    )
    return Mock(descriptor, behaviors, InvocationLog())
