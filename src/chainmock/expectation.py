from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

from chainmock.exceptions import CallCountError, UsageError
from chainmock.graph import behavior_changed
from chainmock.matchers import match_arguments

if TYPE_CHECKING:
    from chainmock.doubles import Double


@dataclass(frozen=True)
class Behavior:
    """What an attached expectation should do when it is called."""

    values: tuple[object, ...] = ()
    args: tuple[object, ...] | None = None
    kwargs: Mapping[str, object] = field(default_factory=dict)
    times: int | None = None

    @classmethod
    def returning(cls, value: object) -> Behavior:
        return cls(values=(value,))

    def returned_double(self) -> Double | None:
        from chainmock.doubles import Double

        if len(self.values) == 1 and isinstance(self.values[0], Double):
            return self.values[0]
        return None

    def apply(self, expectation: Expectation) -> Expectation:
        if self.values:
            expectation.and_return(*self.values)
        if self.args is not None:
            expectation.with_args(*self.args, **dict(self.kwargs))
        if self.times is not None:
            expectation.times(self.times)
        return expectation


class Expectation:
    """One recorded expectation for a method name on a double."""

    def __init__(self, double: Double, method_name: str):
        self._double = double
        self.method_name = method_name
        self._expected_args: tuple[object, ...] | None = None
        self._expected_kwargs: dict[str, object] = {}
        self._return_values: tuple[object, ...] = ()
        self._return_index = 0
        self._raise: tuple[object, tuple[object, ...]] | None = None
        self._replacement: Callable[..., object] | None = None
        self._min_calls = 0
        self._max_calls: int | None = None
        self._count_modifier: str | None = None
        self.calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    @property
    def double(self) -> Double:
        return self._double

    @property
    def call_count(self) -> int:
        return len(self.calls)

    # Argument constraints

    def with_args(self, *args: object, **kwargs: object) -> Expectation:
        self._expected_args = args
        self._expected_kwargs = dict(kwargs)
        return self

    def with_no_args(self) -> Expectation:
        return self.with_args()

    def with_any_args(self) -> Expectation:
        self._expected_args = None
        self._expected_kwargs = {}
        return self

    def accepts_any_args(self) -> bool:
        return self._expected_args is None

    def matches(self, args: tuple[object, ...], kwargs: Mapping[str, object]) -> bool:
        if self._expected_args is None:
            return True
        return match_arguments(self._expected_args, self._expected_kwargs, args, kwargs)

    # Behaviour

    def and_return(self, *values: object) -> Expectation:
        behavior_changed(self, Behavior(values=values).returned_double())
        return self._returns(*values)

    def _returns(self, *values: object) -> Expectation:
        self._return_values = values
        self._return_index = 0
        self._raise = None
        self._replacement = None
        return self

    def and_raise(self, exception: object, *args: object) -> Expectation:
        behavior_changed(self, None)
        self._raise = (exception, args)
        self._replacement = None
        return self

    def replace_with(self, function: Callable[..., object]) -> Expectation:
        if not callable(function):
            raise UsageError(f"replace_with() needs a callable, got {function!r}")
        behavior_changed(self, None)
        self._replacement = function
        self._raise = None
        return self

    def returned_double(self) -> Double | None:
        """The double this expectation always returns, if it is a pass-through."""
        if self._raise is not None or self._replacement is not None:
            return None
        return Behavior(values=self._return_values).returned_double()

    # Call counts

    def at_least(self) -> Expectation:
        self._count_modifier = "at_least"
        return self

    def at_most(self) -> Expectation:
        self._count_modifier = "at_most"
        return self

    def times(self, count: int) -> Expectation:
        if count < 0:
            raise UsageError(f"call count must not be negative, got {count}")
        modifier, self._count_modifier = self._count_modifier, None
        if modifier == "at_least":
            self._min_calls, self._max_calls = count, None
        elif modifier == "at_most":
            self._min_calls, self._max_calls = 0, count
        else:
            self._min_calls, self._max_calls = count, count
        return self

    def once(self) -> Expectation:
        return self.times(1)

    def twice(self) -> Expectation:
        return self.times(2)

    def never(self) -> Expectation:
        return self.times(0)

    def zero_or_more_times(self) -> Expectation:
        self._count_modifier = None
        self._min_calls, self._max_calls = 0, None
        return self

    def exhausted(self) -> bool:
        return self._max_calls is not None and self.call_count >= self._max_calls

    # Dispatch and verification

    def call(self, args: tuple[object, ...], kwargs: dict[str, object]) -> Any:
        self.calls.append((args, kwargs))
        if self._replacement is not None:
            return self._replacement(*args, **kwargs)
        if self._raise is not None:
            exception, exc_args = self._raise
            if isinstance(exception, type):
                raise exception(*exc_args)
            raise exception  # type: ignore[misc]
        if not self._return_values:
            return None
        index = min(self._return_index, len(self._return_values) - 1)
        self._return_index += 1
        return self._return_values[index]

    def verify(self) -> None:
        count = self.call_count
        if count < self._min_calls or (
            self._max_calls is not None and count > self._max_calls
        ):
            raise CallCountError(
                self.describe(), expected=self._describe_count(), actual=count
            )

    def describe(self) -> str:
        if self._expected_args is None:
            signature = "*"
        else:
            parts = [repr(arg) for arg in self._expected_args]
            parts.extend(f"{k}={v!r}" for k, v in self._expected_kwargs.items())
            signature = ", ".join(parts)
        return f"{self._double!r}.{self.method_name}({signature})"

    def _describe_count(self) -> str:
        low, high = self._min_calls, self._max_calls
        if high is None:
            return f"at least {_times(low)}"
        if low == high:
            return "never" if high == 0 else f"exactly {_times(high)}"
        return f"at most {_times(high)}"

    def __repr__(self) -> str:
        return f"<Expectation {self.describe()}>"


def _times(count: int) -> str:
    if count == 1:
        return "once"
    if count == 2:
        return "twice"
    return f"{count} times"


_FLUENT_METHODS = frozenset(
    {
        "with_args",
        "with_no_args",
        "with_any_args",
        "and_return",
        "and_raise",
        "replace_with",
        "at_least",
        "at_most",
        "times",
        "once",
        "twice",
        "never",
        "zero_or_more_times",
    }
)


class ExpectationGroup:
    """Expectations declared together; fluent calls apply to all of them."""

    def __init__(self, expectations: list[Expectation]):
        self.expectations = list(expectations)

    def __getattr__(self, name: str) -> Callable[..., ExpectationGroup]:
        if name not in _FLUENT_METHODS:
            raise AttributeError(name)

        def _fan_out(*args: object, **kwargs: object) -> ExpectationGroup:
            for expectation in self.expectations:
                getattr(expectation, name)(*args, **kwargs)
            return self

        return _fan_out

    def __iter__(self) -> Iterator[Expectation]:
        return iter(self.expectations)

    def __len__(self) -> int:
        return len(self.expectations)

    def __getitem__(self, index: int) -> Expectation:
        return self.expectations[index]

    def verify(self) -> None:
        for expectation in self.expectations:
            expectation.verify()
