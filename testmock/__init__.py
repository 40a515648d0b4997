"""Test doubles for the Arrange-Act-Assert style.

Arrange a mock of a type, act on it, then assert on what was called:

    >>> from testmock import create_mock, check_mock, called, ExactCapture
    >>> pub = create_mock(["order_beer"])
    >>> _ = pub.order_beer(2); _ = pub.order_beer(1)
    >>> [o.passed for o in check_mock(pub, [
    ...     called("order_beer", times=1, with_=ExactCapture(1)),
    ... ])]
    [True]
"""

import re as _re

from testmock.assertions import (
    Called,
    NeverCalled,
    Outcome,
    Predicate,
    assert_mock,
    called,
    check_mock,
    never_called,
)
from testmock.behavior import (
    Behavior,
    BehaviorTable,
    Computed,
    Default,
    FixedValue,
    Overriding,
)
from testmock.capture import Capture
from testmock.config import DEFAULTS, MockConfig, init_logging
from testmock.const import UNSET
from testmock.descriptor import (
    ClassDescriptor,
    DeclaredMethods,
    ITypeDescriptor,
)
from testmock.errors import (
    DuplicateBehaviorError,
    MatcherError,
    MockError,
    PatternError,
    UndefinedMethodError,
    UnknownMethodError,
)
from testmock.history import Invocation, InvocationLog
from testmock.matchers import (
    AnyArgs,
    ArgMatcher,
    CustomPredicate,
    ExactCapture,
    Param,
    SignaturePattern,
    to_matcher,
)
from testmock.mock import Mock, create_mock, invocations, invoke

version = __version__ = "1.0.0"
__version_info__ = tuple(_re.split("[.-]", __version__))

__title__ = "testmock"
__summary__ = "Mock objects that record calls and check them afterwards."
