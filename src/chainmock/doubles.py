from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

from chainmock.attach import attach_values, declare
from chainmock.exceptions import UnexpectedCallError, UsageError
from chainmock.expectation import Expectation, ExpectationGroup
from chainmock.operators import (
    BINARY_METHODS,
    OPERATOR_METHODS,
    SPECIAL_METHOD_OPERATORS,
)

if TYPE_CHECKING:
    from chainmock.container import DoubleContainer
    from chainmock.graph import Edge

_MISSING = object()


class Double:
    """A test double whose methods are whatever has been declared on it.

    Declared names are reachable as attributes (``d.name()``), through
    ``getattr`` for names Python syntax cannot spell (``getattr(d, "ok?")()``),
    through the operators in ``OPERATOR_METHODS``, or explicitly through
    :meth:`invoke`.
    """

    __hash__ = object.__hash__

    def __init__(self, name: str, container: DoubleContainer):
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_container", container)
        object.__setattr__(self, "_edges", {})

    def should_receive(
        self,
        path_or_definitions: str | Mapping[str, object] | None = None,
        /,
        **definitions: object,
    ) -> Expectation | ExpectationGroup:
        """Declare an expectation on a dotted method path.

        A single path string returns its :class:`Expectation` for fluent
        configuration. A mapping of paths to values (or keyword arguments for
        plain names) declares each path as always returning its value and
        returns an :class:`ExpectationGroup`.
        """
        if isinstance(path_or_definitions, str):
            if definitions:
                raise UsageError(
                    "should_receive() takes either a method path or quick "
                    "definitions, not both"
                )
            return declare(self, path_or_definitions)
        merged: dict[str, object] = {}
        if path_or_definitions is not None:
            if not isinstance(path_or_definitions, Mapping):
                raise UsageError(
                    "should_receive() expects a method path or a mapping, "
                    f"got {path_or_definitions!r}"
                )
            merged.update(path_or_definitions)
        merged.update(definitions)
        if not merged:
            raise UsageError("should_receive() needs a method path")
        return attach_values(self, merged)

    def invoke(self, method_name: str, /, *args: Any, **kwargs: Any) -> Any:
        edge: Edge | None = self._edges.get(method_name)
        if edge is None:
            return self._undeclared(method_name, args, kwargs)
        expectation = _select_expectation(edge.expectations, args, kwargs)
        if expectation is None:
            raise UnexpectedCallError(
                self._name,
                method_name,
                args=args,
                kwargs=kwargs,
                candidates=tuple(e.describe() for e in edge.expectations),
            )
        return expectation.call(args, kwargs)

    def _record_expectation(self, method_name: str) -> Expectation:
        return Expectation(self, method_name)

    def _undeclared(
        self, method_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        raise UnexpectedCallError(self._name, method_name, args=args, kwargs=kwargs)

    def _expectations(self) -> Iterator[Expectation]:
        for edge in self._edges.values():
            yield from edge.expectations

    def __getattr__(self, name: str) -> Any:
        edges = self.__dict__.get("_edges")
        if edges is None or name not in edges:
            raise AttributeError(f"{self!r} has no expectation for {name!r}")
        return BoundStub(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setter = f"{name}="
        if setter in self._edges:
            self.invoke(setter, value)
            return
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.__dict__.get('_name', '?')!r}>"


class PartialDouble(Double):
    """A double layered over a real object.

    Each declared name is installed on the object itself as a stub and put
    back by :meth:`_restore`; everything undeclared reaches the real object.
    """

    def __init__(self, target: object, name: str, container: DoubleContainer):
        super().__init__(name, container)
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_originals", {})

    @property
    def target(self) -> object:
        return self._target

    def _record_expectation(self, method_name: str) -> Expectation:
        if method_name in SPECIAL_METHOD_OPERATORS:
            raise UsageError(
                f"operator {SPECIAL_METHOD_OPERATORS[method_name]!r} cannot be "
                f"declared on partial double {self!r}"
            )
        if method_name not in self._originals:
            self._install_stub(method_name)
        return super()._record_expectation(method_name)

    def _install_stub(self, method_name: str) -> None:
        namespace = getattr(self._target, "__dict__", None)
        if not isinstance(namespace, dict):
            raise UsageError(
                f"cannot declare {method_name!r} on {self._target!r}: "
                "object has no instance attributes"
            )
        self._originals[method_name] = namespace.get(method_name, _MISSING)
        namespace[method_name] = BoundStub(self, method_name)

    def _restore(self) -> None:
        if not self._originals:
            return
        namespace = vars(self._target)
        for method_name, original in self._originals.items():
            if original is _MISSING:
                namespace.pop(method_name, None)
            else:
                namespace[method_name] = original
        self._originals.clear()

    def _undeclared(
        self, method_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        return getattr(self._target, method_name)(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        edges = self.__dict__.get("_edges")
        if edges is not None and name in edges:
            return BoundStub(self, name)
        target = self.__dict__.get("_target", _MISSING)
        if target is _MISSING:
            raise AttributeError(name)
        return getattr(target, name)


class BoundStub:
    """Callable standing in for one declared method of a double."""

    __slots__ = ("double", "method_name")

    def __init__(self, double: Double, method_name: str):
        self.double = double
        self.method_name = method_name

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.double.invoke(self.method_name, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<stub {self.double!r}.{self.method_name}>"


def _select_expectation(
    expectations: list[Expectation],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Expectation | None:
    fallback: Expectation | None = None
    for expectation in expectations:
        if not expectation.matches(args, kwargs):
            continue
        if not expectation.exhausted():
            return expectation
        if fallback is None:
            fallback = expectation
    return fallback


def _operator_method(method_name: str) -> Callable[..., Any]:
    symbol = SPECIAL_METHOD_OPERATORS[method_name]

    def dispatch(self: Double, *args: Any, **kwargs: Any) -> Any:
        if method_name in self._edges:
            return self.invoke(method_name, *args, **kwargs)
        if method_name == "__eq__":
            return self is args[0]
        if method_name == "__ne__":
            return self is not args[0]
        if method_name in BINARY_METHODS:
            return NotImplemented
        raise TypeError(f"{self!r} has no expectation for operator {symbol!r}")

    dispatch.__name__ = method_name
    dispatch.__qualname__ = f"Double.{method_name}"
    return dispatch


for _method_name in OPERATOR_METHODS.values():
    setattr(Double, _method_name, _operator_method(_method_name))
del _method_name
