"""Exceptions raised by testmock.

Every exception derives from `MockError`, and also from the builtin
exception a caller would naturally catch for the same problem.
"""

import typing as t


class MockError(Exception):
    """Base class for all testmock errors."""


class DuplicateBehaviorError(MockError, ValueError):
    """A method was configured under more than one behavior category."""

    def __init__(self, method: str, categories: t.Sequence[str] = ()):
        self.method = method
        self.categories = tuple(categories)
        where = f" (in {', '.join(self.categories)})" if categories else ""
        super().__init__(
            f"Method '{method}' has more than one configured behavior{where}"
        )


class UnknownMethodError(MockError, ValueError):
    """A behavior was configured for a method the type doesn't declare."""

    def __init__(self, method: str, type_name: str = "mocked type"):
        self.method = method
        self.type_name = type_name
        super().__init__(self._message())

    def _message(self) -> str:
        return (
            f"Cannot configure behavior for '{self.method}': "
            f"{self.type_name} does not declare it"
        )


class UndefinedMethodError(UnknownMethodError, AttributeError):
    """A mock was asked for a method the mocked type doesn't declare."""

    def _message(self) -> str:
        return f"{self.type_name} has no method '{self.method}'"


class PatternError(MockError, ValueError):
    """A signature pattern was declared with inconsistent parameters."""


class MatcherError(MockError):
    """An argument matcher raised while being evaluated.

    The original exception is available as `__cause__`.
    """
