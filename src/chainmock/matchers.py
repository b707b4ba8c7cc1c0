from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence


class ArgumentMatcher:
    """Base for values that match call arguments by rule instead of ``==``."""

    def matches(self, value: object) -> bool:
        raise NotImplementedError


class _Anything(ArgumentMatcher):
    def matches(self, value: object) -> bool:
        return True

    def __repr__(self) -> str:
        return "ANY"


ANY = _Anything()


class InstanceOf(ArgumentMatcher):
    def __init__(self, *types: type):
        self.types = types

    def matches(self, value: object) -> bool:
        return isinstance(value, self.types)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self.types)
        return f"instance_of({names})"


class Predicate(ArgumentMatcher):
    def __init__(self, check: Callable[[Any], bool], description: str = ""):
        self.check = check
        self.description = description or getattr(check, "__name__", "predicate")

    def matches(self, value: object) -> bool:
        return bool(self.check(value))

    def __repr__(self) -> str:
        return f"predicate({self.description})"


def instance_of(*types: type) -> InstanceOf:
    return InstanceOf(*types)


def predicate(check: Callable[[Any], bool], description: str = "") -> Predicate:
    return Predicate(check, description)


def match_value(expected: object, actual: object) -> bool:
    if isinstance(expected, ArgumentMatcher):
        return expected.matches(actual)
    if expected is actual:
        return True
    return bool(expected == actual)


def match_arguments(
    expected_args: Sequence[object],
    expected_kwargs: Mapping[str, object],
    args: Sequence[object],
    kwargs: Mapping[str, object],
) -> bool:
    if len(expected_args) != len(args):
        return False
    if set(expected_kwargs) != set(kwargs):
        return False
    for expected, actual in zip(expected_args, args):
        if not match_value(expected, actual):
            return False
    return all(match_value(expected_kwargs[key], kwargs[key]) for key in kwargs)
