"""Exception hierarchy for chainmock.

Declaration-time misuse raises :class:`UsageError` subclasses; failures that
only show up once the code under test runs (unexpected calls, wrong call
counts) raise :class:`ExpectationError`, which is also an ``AssertionError``
so test runners report it as a failure rather than an error.
"""

from __future__ import annotations


class ChainMockError(Exception):
    """Root of every error raised by chainmock."""


class UsageError(ChainMockError):
    """The declaration API was used in a way it cannot honour."""


class MalformedPathError(UsageError):
    def __init__(self, path: str, *, reason: str = ""):
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed method path {path!r}{detail}")
        self.path = path
        self.reason = reason


class ConflictingDeclarationError(UsageError):
    def __init__(self, method_name: str, *, double_name: str = ""):
        where = f" on <Double {double_name!r}>" if double_name else ""
        super().__init__(
            f"Conflicting mock declaration for {method_name!r} "
            f"in chained expectation{where}"
        )
        self.method_name = method_name
        self.double_name = double_name


class ExpectationError(ChainMockError, AssertionError):
    """A double was used in a way its expectations do not allow."""


class UnexpectedCallError(ExpectationError):
    def __init__(
        self,
        double_name: str,
        method_name: str,
        *,
        args: tuple[object, ...] = (),
        kwargs: dict[str, object] | None = None,
        candidates: tuple[str, ...] = (),
    ):
        call = _render_call(method_name, args, kwargs or {})
        message = f"<Double {double_name!r}> received unexpected call {call}"
        if candidates:
            message += "\n  expected one of:\n    " + "\n    ".join(candidates)
        super().__init__(message)
        self.double_name = double_name
        self.method_name = method_name
        self.call_args = args
        self.call_kwargs = dict(kwargs or {})


class CallCountError(ExpectationError):
    def __init__(self, description: str, *, expected: str, actual: int):
        super().__init__(
            f"{description} should be called {expected}, "
            f"but was called {actual} time{'s' if actual != 1 else ''}"
        )
        self.description = description
        self.expected = expected
        self.actual = actual


def _render_call(
    method_name: str, args: tuple[object, ...], kwargs: dict[str, object]
) -> str:
    parts = [repr(arg) for arg in args]
    parts.extend(f"{key}={value!r}" for key, value in kwargs.items())
    return f"{method_name}({', '.join(parts)})"
