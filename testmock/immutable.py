"""Immutability helpers for recorded test data.

Captures, invocations, behavior entries and predicates are all values
that must not change once built: an invocation log is only trustworthy
if nothing can rewrite what was recorded in it.

Inherit from `Immutable` to get a class whose instances may set
attributes freely inside `__init__()` (including any `super().__init__()`
chain), and never afterwards. Attempting to assign or delete an
attribute on a constructed instance raises `ImmutableAssignmentError`,
a subclass of `AttributeError`.

Because the metaclass derives from `ABCMeta`, immutable classes may
declare abstract methods.

As with any shallow freeze, containers stored on the instance are not
frozen themselves; store tuples and `MappingProxyType` views instead of
lists and dicts.
"""

import typing as t
from abc import ABCMeta
from functools import wraps


class ImmutableAssignmentError(AttributeError):
    """An attribute could not be set because the object is immutable."""


class _ImmutableMeta(ABCMeta):
    """A metaclass freezing instances once their outermost init returns."""

    @staticmethod
    def _wrap_init(init: t.Callable) -> t.Callable:
        """Wrap an initializer so the instance is frozen when it finishes."""

        @wraps(init)
        def new_init(inst, *args, **kwargs):
            depth = inst.__dict__.get("_init_depth", 0)
            object.__setattr__(inst, "_init_depth", depth + 1)
            try:
                init(inst, *args, **kwargs)
            finally:
                object.__setattr__(inst, "_init_depth", depth)

        return new_init

    @staticmethod
    def _inherited_init(bases: t.Tuple[type, ...]) -> t.Callable:
        """Return the first init present in bases, or object's."""
        for base in bases:
            for kls in base.__mro__:
                if "__init__" in kls.__dict__ and kls is not object:
                    return kls.__dict__["__init__"]
        return lambda self, *_, **__: object.__init__(self)

    @staticmethod
    def _instance_setattr(inst, attr, val):
        """Disallow setting attributes outside of init."""
        if not inst.__dict__.get("_init_depth"):
            raise ImmutableAssignmentError(
                f"{inst.__class__.__name__} is immutable"
            )
        object.__setattr__(inst, attr, val)

    @staticmethod
    def _instance_delattr(inst, attr):
        """Disallow deleting attributes."""
        raise ImmutableAssignmentError(
            f"{inst.__class__.__name__} is immutable"
        )

    def __new__(  # nopep8
        cls: "t.Type[_ImmutableMeta]",
        name: str,
        bases: t.Tuple[type, ...],
        dct: t.Dict[str, t.Any],
    ):
        """Create the class object."""
        init = dct.get("__init__")
        if init is not None:
            dct["__init__"] = cls._wrap_init(init)
        elif not any(isinstance(b, _ImmutableMeta) for b in bases):
            dct["__init__"] = cls._wrap_init(cls._inherited_init(bases))
        dct["__setattr__"] = cls._instance_setattr
        dct["__delattr__"] = cls._instance_delattr
        return super().__new__(cls, name, bases, dct)


class Immutable(metaclass=_ImmutableMeta):
    """A class whose instances may not be mutated after construction.

    Subclasses can call `super().__init__()` anywhere in their own
    `__init__()`; the instance is only frozen once the outermost
    initializer has returned.
    """
