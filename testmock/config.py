"""Mock configuration and logging setup.

A `MockConfig` carries the behavior mappings a mock is built from:

- `returning`: method name -> value returned on every call
- `computing`: method name -> zero-argument callable, called on every call
- `overriding`: method name -> callable receiving the call's arguments
- `default_return`: what unconfigured methods return (default: `UNSET`)

Configs are plain values. Build one with keyword arguments, or from the
defaults with `MockConfig.default_with_overrides(**overrides)`, and
derive variants with `with_updates(**kwargs)`. Validation against a
mocked type happens in `create_mock()`, since only it knows the type.
"""

import logging
import sys
import typing as t
from pathlib import Path
from types import MappingProxyType

from .const import BEHAVIOR_CATEGORIES, UNSET

BehaviorMapping = t.Mapping[str, t.Any]


class DEFAULTS:
    """Config defaults."""

    DEFAULT_RETURN = UNSET
    LOG_FRMT = "%(asctime)s|%(name)s|%(levelname)s|%(thread)d|%(message)s"
    LOG_STREAM = sys.stderr


def init_logging(
    level: int = logging.NOTSET,
    frmt: t.Optional[str] = None,
    filename: t.Union[str, Path, None] = None,
    stream: t.Optional[t.IO] = DEFAULTS.LOG_STREAM,
    logger: t.Optional[logging.Logger] = None,
) -> None:
    """Configure the specified logger, or the root logger otherwise."""
    logger = logger or logging.getLogger()
    logger.setLevel(level)

    formatter = logging.Formatter(frmt or DEFAULTS.LOG_FRMT)
    if len(logger.handlers) == 0 and stream is not None:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if filename:
        handler = logging.FileHandler(filename)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


class MockConfig:
    """The behaviors a mock is configured with."""

    def __init__(
        self,
        returning: t.Optional[BehaviorMapping] = None,
        computing: t.Optional[BehaviorMapping] = None,
        overriding: t.Optional[BehaviorMapping] = None,
        default_return: t.Any = DEFAULTS.DEFAULT_RETURN,
    ) -> None:
        """Construct a MockConfig, copying the given mappings."""
        self.returning = MappingProxyType(dict(returning or {}))
        self.computing = MappingProxyType(dict(computing or {}))
        self.overriding = MappingProxyType(dict(overriding or {}))
        self.default_return = default_return

    @classmethod
    def default_with_overrides(cls, **overrides: t.Any) -> "MockConfig":
        """Construct a MockConfig with default values, plus overrides."""
        return cls().with_updates(**overrides)

    def with_updates(self, **kwargs: t.Any) -> "MockConfig":
        """Create a new config with the specified updates.

        The current config is used as a base. Any properties not specified
        in keyword arguments will remain unchanged.
        """
        unknown = set(kwargs) - set(dict(self))
        if unknown:
            raise TypeError(
                f"Unknown mock config option(s): {', '.join(sorted(unknown))}"
            )
        return self.__class__(**{**dict(self), **kwargs})

    def categories(self) -> t.Iterator[t.Tuple[str, BehaviorMapping]]:
        """Iterate over (category, mapping) pairs of behavior mappings."""
        yield from ((c, getattr(self, c)) for c in BEHAVIOR_CATEGORIES)

    def __repr__(self) -> str:
        """A string representation indicating the class and its properties."""
        return "{}({})".format(
            self.__class__.__name__,
            ", ".join(f"{k}={v!r}" for k, v in self),
        )

    def __eq__(self, other: t.Any) -> bool:
        """Configs are equal if their public values are equal."""
        if not isinstance(other, self.__class__):
            return False
        return all(getattr(other, k) == v for k, v in self)

    def __iter__(self) -> t.Iterator[t.Tuple[str, t.Any]]:
        """Iterate over config (k, v) pairs."""
        yield from (
            (k, v) for k, v in vars(self).items() if not k.startswith("_")
        )
