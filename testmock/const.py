"""Constant values for testmock."""


class _Unset:
    """The value returned by methods with no configured behavior."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()

BEHAVIOR_CATEGORIES = ("returning", "computing", "overriding")
