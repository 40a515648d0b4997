#! /usr/bin/env py.test
"""Test argument matchers and the signature binder."""

import typing as t

import pytest

from testmock import (
    AnyArgs,
    Capture,
    CustomPredicate,
    ExactCapture,
    MatcherError,
    Param,
    PatternError,
    SignaturePattern,
    to_matcher,
)
from testmock.matchers import _Unbindable


class TestAnyArgs:
    @pytest.mark.parametrize(
        "capture", (Capture(), Capture(1, 2), Capture(a=[1], b={"c": 2}))
    )
    def test_matches_everything(self, capture):
        assert AnyArgs().matches(capture)


class TestExactCapture:
    """Tests for exact argument matching."""

    @pytest.mark.parametrize(
        "expected, actual, matches",
        (
            (ExactCapture(), Capture(), True),
            (ExactCapture(1), Capture(1), True),
            (ExactCapture(1), Capture(1, 1), False),
            (ExactCapture(1, 2), Capture(2, 1), False),
            (ExactCapture(1), Capture(x=1), False),
            (ExactCapture(a=1, b=2), Capture(b=2, a=1), True),
            (ExactCapture(a=1), Capture(a=1, b=2), False),
            (ExactCapture([1, {"k": (2, 3)}]), Capture([1, {"k": (2, 3)}]), True),
            (ExactCapture([1, {"k": (2, 3)}]), Capture([1, {"k": (2, 4)}]), False),
            (ExactCapture(1), Capture(1.0), True),
        ),
    )
    def test_matches(self, expected, actual, matches):
        assert expected.matches(actual) is matches

    def test_of(self):
        capture = Capture(1, unit="pint")
        assert ExactCapture.of(capture) == ExactCapture(1, unit="pint")
        assert ExactCapture.of(capture).expected == capture

    def test_capture_as_argument(self):
        """A capture passed as a value is a value, not the expectation."""
        inner = Capture(1)
        assert ExactCapture(inner).matches(Capture(inner))
        assert not ExactCapture(inner).matches(inner)

    def test_raising_comparison(self):
        """A value whose == raises is reported as a matcher failure."""

        class Touchy:
            def __eq__(self, other):
                raise RuntimeError("no comparing")

            __hash__ = object.__hash__

        with pytest.raises(MatcherError) as err:
            ExactCapture(1).matches(Capture(Touchy()))
        assert isinstance(err.value.__cause__, RuntimeError)

    def test_describe(self):
        assert ExactCapture(1, "a", unit="pint").describe() == (
            "(1, 'a', unit='pint')"
        )


class TestCustomPredicate:
    """Tests for predicates given as callables."""

    def test_truthiness(self):
        assert CustomPredicate(lambda c: c.args).matches(Capture(1))
        assert not CustomPredicate(lambda c: c.args).matches(Capture())

    def test_receives_capture(self):
        received = []
        CustomPredicate(received.append).matches(Capture(1, x=2))
        assert received == [Capture(1, x=2)]

    def test_failure_is_matcher_error(self):
        def explode(capture):
            raise ValueError("boom")

        with pytest.raises(MatcherError) as err:
            CustomPredicate(explode).matches(Capture())
        assert isinstance(err.value.__cause__, ValueError)
        assert "explode" in str(err.value)

    def test_not_callable(self):
        with pytest.raises(TypeError):
            CustomPredicate(3)


class TestSignaturePattern:
    """Tests for binding captures to parameter patterns."""

    @pytest.mark.parametrize(
        "params, capture, matches",
        (
            # arity
            ((), Capture(), True),
            ((), Capture(1), False),
            ((Param.positional(),), Capture(), False),
            ((Param.positional(),), Capture(1), True),
            ((Param.positional(),), Capture(1, 2), False),
            ((Param.positional(), Param.optional()), Capture(1), True),
            ((Param.positional(), Param.optional()), Capture(1, 2), True),
            ((Param.positional(), Param.optional()), Capture(1, 2, 3), False),
            ((Param.rest(),), Capture(), True),
            ((Param.rest(),), Capture(1, 2, 3), True),
            ((Param.positional(), Param.rest()), Capture(), False),
            # named
            ((Param.named("x"),), Capture(), True),
            ((Param.named("x"),), Capture(x=1), True),
            ((Param.named("x"),), Capture(y=1), False),
            ((Param.named("x", required=True),), Capture(), False),
            ((Param.named("x"), Param.rest_named()), Capture(x=1, y=2), True),
            ((Param.rest_named(),), Capture(1), False),
            # positional values are not taken by name unless keyword=True
            ((Param.positional(name="a"),), Capture(a=1), False),
            ((Param.positional(name="a", keyword=True),), Capture(a=1), True),
            (
                (Param.positional(name="a", keyword=True),),
                Capture(1, a=1),
                False,
            ),
            # types
            ((Param.positional(isa=int),), Capture(1), True),
            ((Param.positional(isa=int),), Capture("1"), False),
            ((Param.positional(isa=(int, str)),), Capture("1"), True),
            ((Param.optional(isa=int),), Capture(), True),
            ((Param.rest(isa=int),), Capture(1, 2, 3), True),
            ((Param.rest(isa=int),), Capture(1, "2", 3), False),
            ((Param.named("x", isa=str),), Capture(x=1), False),
            ((Param.rest_named(isa=str),), Capture(x="a", y="b"), True),
            ((Param.rest_named(isa=str),), Capture(x="a", y=2), False),
            # guards
            ((Param.positional(where=lambda v: v > 1),), Capture(2), True),
            ((Param.positional(where=lambda v: v > 1),), Capture(1), False),
            ((Param.rest(where=lambda vs: len(vs) == 2),), Capture(1, 2), True),
            ((Param.rest(where=lambda vs: len(vs) == 2),), Capture(1), False),
            (
                (Param.rest_named(where=lambda kw: "tip" in kw),),
                Capture(tip=1),
                True,
            ),
            ((Param.named("x", where=bool),), Capture(x=0), False),
        ),
    )
    def test_matches(self, params, capture, matches):
        assert SignaturePattern(*params).matches(capture) is matches

    def test_type_checked_before_guard(self):
        """Guards only see values that passed the type constraint."""
        seen = []
        pattern = SignaturePattern(
            Param.positional(isa=int, where=lambda v: seen.append(v) or True)
        )
        assert not pattern.matches(Capture("x"))
        assert seen == []

    def test_raising_guard(self):
        pattern = SignaturePattern(Param.positional(where=lambda v: 1 / v))
        with pytest.raises(MatcherError) as err:
            pattern.matches(Capture(0))
        assert isinstance(err.value.__cause__, ZeroDivisionError)

    def test_bind(self):
        pattern = SignaturePattern(
            Param.positional(name="pints"),
            Param.rest(name="extra"),
            Param.named("size"),
            Param.rest_named(name="options"),
        )
        bound = pattern.bind(Capture(2, 3, size="half", ice=False))
        assert bound == {
            "'pints'": 2,
            "*extra": (3,),
            "size": "half",
            "**options": {"ice": False},
        }

    @pytest.mark.parametrize(
        "capture, reason",
        (
            (Capture(), "missing required positional"),
            (Capture(1, 2), "too many positional"),
            (Capture(1, x=2), "unexpected named argument 'x'"),
            (Capture("1"), "expected int, got str"),
        ),
    )
    def test_bind_failures(self, capture, reason):
        pattern = SignaturePattern(Param.positional(isa=int))
        with pytest.raises(_Unbindable) as err:
            pattern.bind(capture)
        assert reason in str(err.value)

    @pytest.mark.parametrize(
        "params",
        (
            (Param.optional(), Param.positional()),
            (Param.rest(), Param.positional()),
            (Param.rest(), Param.optional()),
            (Param.rest(), Param.rest()),
            (Param.rest_named(), Param.rest_named()),
            (Param.named("x"), Param.named("x")),
            (Param.positional(name="x"), Param.named("x")),
            ("x",),
        ),
    )
    def test_invalid_patterns(self, params):
        with pytest.raises(PatternError):
            SignaturePattern(*params)

    def test_invalid_params(self):
        with pytest.raises(PatternError):
            Param.named("")
        with pytest.raises(PatternError):
            Param.positional(where="not callable")

    @pytest.mark.parametrize(
        "isa", (t.List[int], "int", 3, (int, "str"), (), [int, str])
    )
    def test_invalid_type_constraints(self, isa):
        """Constraints isinstance() can't use are refused up front."""
        with pytest.raises(PatternError):
            Param.positional(isa=isa)
        with pytest.raises(PatternError):
            Param.rest_named(isa=isa)

    def test_describe(self):
        pattern = SignaturePattern(
            Param.positional(isa=int, name="pints"),
            Param.optional(),
            Param.rest(isa=(int, float)),
            Param.named("size", isa=str),
            Param.rest_named(name="kw"),
        )
        assert pattern.describe() == (
            "signature (pints: int, _=..., *_: int | float, size: str=..., **kw)"
        )


class TestFromCallable:
    """Tests for building patterns from Python signatures."""

    @staticmethod
    def order(pints: int, size="pint", *extras, ice: bool, **options):
        pass

    @pytest.mark.parametrize(
        "capture, matches",
        (
            (Capture(2, ice=True), True),
            (Capture(pints=2, ice=True), True),
            (Capture(2, "half", "lemon", ice=False, glass="tall"), True),
            (Capture(2), False),
            (Capture("2", ice=True), False),
            (Capture(2, ice="yes"), False),
            (Capture(ice=True), False),
        ),
    )
    def test_function(self, capture, matches):
        pattern = SignaturePattern.from_callable(self.order)
        assert pattern.matches(capture) is matches

    def test_drops_self(self):
        class Pub:
            def pay(self, amount: int):
                pass

        pattern = SignaturePattern.from_callable(Pub.pay)
        assert pattern.matches(Capture(5))
        assert not pattern.matches(Capture(Pub(), 5))

    def test_ignores_non_class_annotations(self):
        def pay(amount: "int", tip: "t.Optional[int]" = None):
            pass

        pattern = SignaturePattern.from_callable(pay)
        assert pattern.matches(Capture("anything", tip=[]))

    def test_ignores_generic_annotations(self):
        def restock(items: t.List[str], counts: t.Dict[str, int] = None):
            pass

        pattern = SignaturePattern.from_callable(restock)
        assert pattern.matches(Capture(5, counts="lots"))


class TestToMatcher:
    """Tests for coercing `with_=` values to matchers."""

    def test_none(self):
        assert to_matcher(None) == AnyArgs()

    def test_matcher_unchanged(self):
        matcher = ExactCapture(1)
        assert to_matcher(matcher) is matcher

    def test_capture(self):
        assert to_matcher(Capture(1, x=2)) == ExactCapture(1, x=2)

    @pytest.mark.parametrize("expected", ((1, 2), [1, 2]))
    def test_sequence(self, expected):
        assert to_matcher(expected) == ExactCapture(1, 2)

    def test_empty_sequence(self):
        assert to_matcher(()) == ExactCapture()

    def test_params(self):
        matcher = to_matcher([Param.positional(isa=int), Param.rest()])
        assert isinstance(matcher, SignaturePattern)
        assert matcher.matches(Capture(1, 2, 3))

    def test_single_param(self):
        assert isinstance(to_matcher(Param.rest()), SignaturePattern)

    def test_callable(self):
        matcher = to_matcher(lambda c: True)
        assert isinstance(matcher, CustomPredicate)

    @pytest.mark.parametrize("expected", (1, "1", {"x": 1}))
    def test_unsupported(self, expected):
        with pytest.raises(TypeError):
            to_matcher(expected)
