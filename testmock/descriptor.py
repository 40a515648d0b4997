"""Descriptions of the types that can be mocked.

The call interceptor never looks at a real object's method table. It
only asks a type descriptor whether a method name is declared, so
anything able to answer that question can be mocked.
"""

import typing as t
from abc import ABC, abstractmethod


class ITypeDescriptor(ABC):
    """Type descriptor interface."""

    @abstractmethod
    def is_declared(self, name: str) -> bool:
        """Return whether the mocked type declares a method `name`."""

    @property
    def name(self) -> str:
        """Return the type's name, for diagnostics."""
        return self.__class__.__name__

    @property
    def mocked_class(self) -> t.Optional[type]:
        """Return the real class being stood in for, if there is one."""
        return None


class DeclaredMethods(ITypeDescriptor):
    """A type described by an explicit set of method names."""

    def __init__(self, names: t.Iterable[str], name: str = "MockedType"):
        self._names = frozenset(names)
        self._name = name

    def __repr__(self) -> str:
        return f"DeclaredMethods({sorted(self._names)!r}, name={self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def methods(self) -> t.FrozenSet[str]:
        """Return all declared method names."""
        return self._names

    def is_declared(self, name: str) -> bool:
        return name in self._names


class ClassDescriptor(ITypeDescriptor):
    """A type described by a Python class.

    Public callables of the class (including abstract ones, so interfaces
    built on `abc.ABC` can be mocked) count as declared methods. Names
    starting with an underscore never do.
    """

    def __init__(self, kls: type):
        if not isinstance(kls, type):
            raise TypeError(f"{kls!r} is not a class")
        self._kls = kls

    def __repr__(self) -> str:
        return f"ClassDescriptor({self._kls.__qualname__})"

    @property
    def name(self) -> str:
        return self._kls.__name__

    @property
    def mocked_class(self) -> type:
        return self._kls

    def is_declared(self, name: str) -> bool:
        if not name or name.startswith("_"):
            return False
        return callable(getattr(self._kls, name, None))


def as_descriptor(
    described: t.Union[ITypeDescriptor, type, t.Iterable[str]]
) -> ITypeDescriptor:
    """Return a type descriptor for a descriptor, a class or method names."""
    if isinstance(described, ITypeDescriptor):
        return described
    if isinstance(described, type):
        return ClassDescriptor(described)
    if isinstance(described, str):
        raise TypeError(
            "Method names must be given as an iterable of strings, "
            f"not a single string ({described!r})"
        )
    names = list(described)
    if not all(isinstance(n, str) for n in names):
        raise TypeError(f"Method names must be strings: {names!r}")
    return DeclaredMethods(names)
