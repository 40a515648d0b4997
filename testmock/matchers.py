"""Argument matchers.

An argument matcher is a predicate over a `Capture`. Four kinds exist:

- `AnyArgs` matches every capture
- `ExactCapture` matches a capture equal to the one it was given
- `SignaturePattern` matches a capture that could be bound to a list
  of parameter declarations (`Param`), honoring arity, type constraints
  and guards
- `CustomPredicate` matches when a callable says so

`to_matcher()` turns whatever a test author passed as `with_=` into one
of these.
"""

import enum
import inspect
import logging
import typing as t
from abc import abstractmethod

from .capture import Capture
from .errors import MatcherError, PatternError
from .immutable import Immutable

log = logging.getLogger(__name__)


TypeConstraint = t.Union[type, t.Tuple[type, ...]]
Guard = t.Callable[[t.Any], t.Any]


class ArgMatcher(Immutable):
    """Base class for argument matchers."""

    @abstractmethod
    def matches(self, capture: Capture) -> bool:
        """Return whether the capture satisfies this matcher.

        Raises `MatcherError` if user code (a predicate, a guard or a
        value's `__eq__`) raised while deciding.
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a short description for diagnostics."""

    def __str__(self) -> str:
        return self.describe()


class AnyArgs(ArgMatcher):
    """Match any arguments at all."""

    def matches(self, capture: Capture) -> bool:
        return True

    def describe(self) -> str:
        return "any arguments"

    def __repr__(self) -> str:
        return "AnyArgs()"

    def __eq__(self, other: t.Any) -> bool:
        return isinstance(other, AnyArgs)

    def __hash__(self) -> int:
        return hash(AnyArgs)


class ExactCapture(ArgMatcher):
    """Match calls made with exactly these arguments.

    >>> ExactCapture(1, unit="pint").matches(Capture(1, unit="pint"))
    True
    """

    def __init__(self, *args: t.Any, **kwargs: t.Any):
        self.expected = Capture(*args, **kwargs)

    @classmethod
    def of(cls, capture: Capture) -> "ExactCapture":
        """Return a matcher expecting an already built capture."""
        return cls(*capture.args, **capture.kwargs)

    def matches(self, capture: Capture) -> bool:
        try:
            return capture == self.expected
        except Exception as exc:
            raise MatcherError(
                f"comparing {capture!r} with {self.describe()} raised {exc!r}"
            ) from exc

    def describe(self) -> str:
        return f"({self.expected.signature()})"

    def __repr__(self) -> str:
        return f"ExactCapture({self.expected.signature()})"

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, ExactCapture):
            return NotImplemented
        return self.expected == other.expected

    def __hash__(self) -> int:
        return hash(self.expected)


class CustomPredicate(ArgMatcher):
    """Match captures for which `func(capture)` is truthy."""

    def __init__(self, func: t.Callable[[Capture], t.Any]):
        if not callable(func):
            raise TypeError(f"{func!r} is not callable")
        self.func = func

    def matches(self, capture: Capture) -> bool:
        try:
            return bool(self.func(capture))
        except Exception as exc:
            raise MatcherError(
                f"{self.describe()} raised {exc!r} for {capture!r}"
            ) from exc

    def describe(self) -> str:
        return f"predicate {_callable_name(self.func)}"

    def __repr__(self) -> str:
        return f"CustomPredicate({_callable_name(self.func)})"


class ParamKind(enum.Enum):
    """The kinds of slot a signature pattern may declare."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    REST = "rest"
    NAMED = "named"
    REST_NAMED = "rest_named"


_POSITIONAL_KINDS = (ParamKind.REQUIRED, ParamKind.OPTIONAL)


class Param(Immutable):
    """One parameter of a signature pattern.

    Use the constructors rather than instantiating directly:

    - `Param.positional(isa=int)` a required positional value
    - `Param.optional(isa=int)` an optional positional value
    - `Param.rest(isa=int)` any number of further positional values
    - `Param.named("unit", isa=str)` a named value, optional unless
      `required=True`
    - `Param.rest_named()` any number of further named values

    `isa` is a class or tuple of classes the value must be an instance
    of. `where` is a guard called with the bound value; the parameter
    only binds if it returns something truthy. For `rest` and
    `rest_named`, `isa` applies to every collected value while `where`
    receives the whole tuple or dict.
    """

    def __init__(
        self,
        kind: ParamKind,
        name: t.Optional[str] = None,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        required: bool = False,
        keyword: bool = False,
    ):
        if where is not None and not callable(where):
            raise PatternError(
                f"Guard for {name or kind.value} is not callable"
            )
        if isa is not None and not _is_type_constraint(isa):
            raise PatternError(
                f"Type constraint for {name or kind.value} must be a class "
                f"or a tuple of classes, got {isa!r}"
            )
        if kind is ParamKind.NAMED and not name:
            raise PatternError("Named parameters must have a name")
        self.kind = kind
        self.name = name
        self.isa = isa
        self.where = where
        self.required = kind is ParamKind.REQUIRED or (
            kind is ParamKind.NAMED and required
        )
        self.keyword = keyword and name is not None

    @classmethod
    def positional(
        cls,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        name: t.Optional[str] = None,
        keyword: bool = False,
    ) -> "Param":
        return cls(ParamKind.REQUIRED, name, isa, where, keyword=keyword)

    @classmethod
    def optional(
        cls,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        name: t.Optional[str] = None,
        keyword: bool = False,
    ) -> "Param":
        return cls(ParamKind.OPTIONAL, name, isa, where, keyword=keyword)

    @classmethod
    def rest(
        cls,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        name: t.Optional[str] = None,
    ) -> "Param":
        return cls(ParamKind.REST, name, isa, where)

    @classmethod
    def named(
        cls,
        name: str,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        required: bool = False,
    ) -> "Param":
        return cls(ParamKind.NAMED, name, isa, where, required=required)

    @classmethod
    def rest_named(
        cls,
        isa: t.Optional[TypeConstraint] = None,
        where: t.Optional[Guard] = None,
        name: t.Optional[str] = None,
    ) -> "Param":
        return cls(ParamKind.REST_NAMED, name, isa, where)

    def __repr__(self) -> str:
        return f"Param({self.describe()})"

    def describe(self) -> str:
        """Return the parameter written roughly as Python would."""
        isa = ""
        if self.isa is not None:
            isa = ": " + _type_name(self.isa)
        name = self.name or "_"
        if self.kind is ParamKind.REST:
            text = f"*{name}{isa}"
        elif self.kind is ParamKind.REST_NAMED:
            text = f"**{name}{isa}"
        elif self.kind is ParamKind.NAMED:
            text = f"{name}{isa}" + ("" if self.required else "=...")
        elif self.kind is ParamKind.OPTIONAL:
            text = f"{name}{isa}=..."
        else:
            text = f"{name}{isa}"
        if self.where is not None:
            text += f" where {_callable_name(self.where)}"
        return text

    def check(self, value: t.Any, label: str) -> None:
        """Raise `_Unbindable` unless `value` satisfies this parameter."""
        if self.kind in (ParamKind.REST, ParamKind.REST_NAMED):
            items = value.values() if isinstance(value, dict) else value
            for item in items:
                self._check_type(item, label)
        else:
            self._check_type(value, label)
        self._check_guard(value, label)

    def _check_type(self, value: t.Any, label: str) -> None:
        if self.isa is not None and not isinstance(value, self.isa):
            raise _Unbindable(
                f"{label} expected {_type_name(self.isa)}, "
                f"got {type(value).__name__} {value!r}"
            )

    def _check_guard(self, value: t.Any, label: str) -> None:
        if self.where is None:
            return
        try:
            accepted = self.where(value)
        except Exception as exc:
            raise MatcherError(
                f"guard {_callable_name(self.where)} on {label} raised "
                f"{exc!r} for {value!r}"
            ) from exc
        if not accepted:
            raise _Unbindable(
                f"{label} value {value!r} failed guard "
                f"{_callable_name(self.where)}"
            )


class _Unbindable(Exception):
    """A capture cannot be bound to a signature pattern."""


class SignaturePattern(ArgMatcher):
    """Match captures that could be bound to a parameter list.

    >>> pattern = SignaturePattern(Param.positional(isa=int), Param.rest())
    >>> pattern.matches(Capture(1, "two", 3.0))
    True
    >>> pattern.matches(Capture("one"))
    False
    """

    def __init__(self, *params: Param):
        self.params: t.Tuple[Param, ...] = params
        self._validate()
        self.positional = tuple(
            p for p in params if p.kind in _POSITIONAL_KINDS
        )
        self.rest = next(
            (p for p in params if p.kind is ParamKind.REST), None
        )
        self.named = {p.name: p for p in params if p.kind is ParamKind.NAMED}
        self.rest_named = next(
            (p for p in params if p.kind is ParamKind.REST_NAMED), None
        )

    def _validate(self) -> None:
        seen_optional = seen_rest = seen_rest_named = False
        names: t.Set[str] = set()
        for param in self.params:
            if not isinstance(param, Param):
                raise PatternError(f"{param!r} is not a Param")
            if param.name is not None:
                if param.name in names:
                    raise PatternError(f"Duplicate parameter '{param.name}'")
                names.add(param.name)
            if param.kind in _POSITIONAL_KINDS and seen_rest:
                raise PatternError(
                    f"Positional parameter {param.describe()} follows *rest"
                )
            if param.kind is ParamKind.REQUIRED and seen_optional:
                raise PatternError(
                    f"Required parameter {param.describe()} follows an "
                    "optional one"
                )
            if param.kind is ParamKind.OPTIONAL:
                seen_optional = True
            elif param.kind is ParamKind.REST:
                if seen_rest:
                    raise PatternError("Only one *rest parameter is allowed")
                seen_rest = True
            elif param.kind is ParamKind.REST_NAMED:
                if seen_rest_named:
                    raise PatternError(
                        "Only one **rest_named parameter is allowed"
                    )
                seen_rest_named = True

    @classmethod
    def from_callable(cls, func: t.Callable) -> "SignaturePattern":
        """Build a pattern from a Python callable's signature.

        Parameters keep their kind, optionality and keyword-ability.
        Annotations that are classes become type constraints; any other
        annotation is ignored. A leading `self` or `cls` is dropped, so
        plain functions taken off a class can be used directly.
        """
        sig = inspect.signature(func)
        parameters = list(sig.parameters.values())
        if parameters and parameters[0].name in ("self", "cls"):
            parameters = parameters[1:]

        params = []
        for p in parameters:
            isa = p.annotation
            if isa is inspect.Parameter.empty or not _is_type_constraint(isa):
                isa = None
            has_default = p.default is not inspect.Parameter.empty
            if p.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            ):
                make = Param.optional if has_default else Param.positional
                params.append(
                    make(
                        isa=isa,
                        name=p.name,
                        keyword=p.kind
                        is inspect.Parameter.POSITIONAL_OR_KEYWORD,
                    )
                )
            elif p.kind is inspect.Parameter.VAR_POSITIONAL:
                params.append(Param.rest(isa=isa, name=p.name))
            elif p.kind is inspect.Parameter.KEYWORD_ONLY:
                params.append(
                    Param.named(p.name, isa=isa, required=not has_default)
                )
            else:
                params.append(Param.rest_named(isa=isa, name=p.name))
        return cls(*params)

    def matches(self, capture: Capture) -> bool:
        try:
            self.bind(capture)
        except _Unbindable as exc:
            log.debug("%r does not bind %r: %s", self, capture, exc)
            return False
        return True

    def bind(self, capture: Capture) -> t.Dict[str, t.Any]:
        """Bind a capture to the pattern's parameters.

        Returns the bound values keyed by parameter label. Raises
        `_Unbindable` if the capture doesn't fit, and `MatcherError` if a
        guard raised.
        """
        filled: t.Dict[int, t.Any] = {}
        n_positional = len(self.positional)
        for idx, value in enumerate(capture.args[:n_positional]):
            filled[idx] = value
        surplus = tuple(capture.args[n_positional:])
        if surplus and self.rest is None:
            raise _Unbindable(
                f"too many positional arguments: got {len(capture.args)}, "
                f"accepts at most {n_positional}"
            )

        named_values: t.Dict[str, t.Any] = {}
        extra_named: t.Dict[str, t.Any] = {}
        for key, value in capture.kwargs.items():
            if key in self.named:
                named_values[key] = value
                continue
            idx = self._keyword_index(key)
            if idx is not None:
                if idx in filled:
                    raise _Unbindable(f"multiple values for '{key}'")
                filled[idx] = value
            elif self.rest_named is not None:
                extra_named[key] = value
            else:
                raise _Unbindable(f"unexpected named argument '{key}'")

        for idx, param in enumerate(self.positional):
            if param.required and idx not in filled:
                raise _Unbindable(
                    f"missing required positional {self._label(idx)}"
                )
        for name, param in self.named.items():
            if param.required and name not in named_values:
                raise _Unbindable(f"missing required named argument '{name}'")

        bound: t.Dict[str, t.Any] = {}
        for idx, value in sorted(filled.items()):
            label = self._label(idx)
            self.positional[idx].check(value, label)
            bound[label] = value
        if self.rest is not None:
            label = f"*{self.rest.name or 'rest'}"
            self.rest.check(surplus, label)
            bound[label] = surplus
        for name, value in named_values.items():
            self.named[name].check(value, f"'{name}'")
            bound[name] = value
        if self.rest_named is not None:
            label = f"**{self.rest_named.name or 'rest_named'}"
            self.rest_named.check(extra_named, label)
            bound[label] = extra_named
        return bound

    def _keyword_index(self, key: str) -> t.Optional[int]:
        for idx, param in enumerate(self.positional):
            if param.keyword and param.name == key:
                return idx
        return None

    def _label(self, idx: int) -> str:
        name = self.positional[idx].name
        return f"'{name}'" if name else f"#{idx}"

    def describe(self) -> str:
        params = ", ".join(p.describe() for p in self.params)
        return f"signature ({params})"

    def __repr__(self) -> str:
        return f"SignaturePattern({', '.join(map(repr, self.params))})"


def to_matcher(expected: t.Any) -> ArgMatcher:
    """Return the argument matcher a `with_=` value stands for.

    - `None` means any arguments
    - an `ArgMatcher` is used as is
    - a `Capture` is matched exactly
    - a `Param`, or a tuple or list made only of `Param`s, is a signature
      pattern
    - any other tuple or list holds the exact positional arguments
    - a callable is a custom predicate over the capture
    """
    if expected is None:
        return AnyArgs()
    if isinstance(expected, ArgMatcher):
        return expected
    if isinstance(expected, Capture):
        return ExactCapture.of(expected)
    if isinstance(expected, Param):
        return SignaturePattern(expected)
    if isinstance(expected, (tuple, list)):
        if expected and all(isinstance(p, Param) for p in expected):
            return SignaturePattern(*expected)
        return ExactCapture(*expected)
    if callable(expected):
        return CustomPredicate(expected)
    raise TypeError(
        f"Cannot match arguments against {expected!r}; use a Capture, "
        "ExactCapture, SignaturePattern, Param list or callable"
    )


def _callable_name(func: t.Callable) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def _type_name(isa: TypeConstraint) -> str:
    if isinstance(isa, tuple):
        return " | ".join(k.__name__ for k in isa)
    return isa.__name__


def _is_type_constraint(isa: t.Any) -> bool:
    """Return whether `isa` can be the second argument of `isinstance()`."""
    kinds = isa if isinstance(isa, tuple) else (isa,)
    if not kinds or not all(isinstance(k, type) for k in kinds):
        return False
    # Parameterized generics such as list[int] pass for classes on some
    # interpreters but are refused by isinstance()
    try:
        isinstance(None, isa)
    except TypeError:
        return False
    return True
