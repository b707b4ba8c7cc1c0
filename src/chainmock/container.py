from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
import logging
from types import TracebackType
from typing import Iterator, Mapping

from chainmock.config import ChainMockConfig
from chainmock.doubles import Double, PartialDouble
from chainmock.exceptions import UsageError
from chainmock.paths import Segment

logger = logging.getLogger(__name__)

_CURRENT_CONTAINER: ContextVar[DoubleContainer | None] = ContextVar(
    "chainmock_current_container",
    default=None,
)


class DoubleContainer:
    """Owns every double created for one test.

    Verification and teardown act on all of them at once, including the
    intermediate doubles vivified by chained declarations.
    """

    def __init__(self, config: ChainMockConfig | None = None):
        self.config = config or ChainMockConfig()
        self._doubles: list[Double] = []
        self._partials: dict[int, PartialDouble] = {}
        self._tokens: list[Token[DoubleContainer | None]] = []
        self._anonymous = 0

    @property
    def doubles(self) -> tuple[Double, ...]:
        return tuple(self._doubles)

    def double(
        self,
        name: str | None = None,
        definitions: Mapping[str, object] | None = None,
        /,
        **quick_definitions: object,
    ) -> Double:
        node = Double(name or self._anonymous_name(), self)
        self._doubles.append(node)
        _define(node, definitions, quick_definitions)
        return node

    def partial(
        self,
        target: object,
        name: str | None = None,
        definitions: Mapping[str, object] | None = None,
        /,
        **quick_definitions: object,
    ) -> PartialDouble:
        if isinstance(target, Double):
            raise UsageError(f"{target!r} is already a double")
        node = self._partials.get(id(target))
        if node is None:
            node = PartialDouble(target, name or f"partial {type(target).__name__}", self)
            self._partials[id(target)] = node
            self._doubles.append(node)
        _define(node, definitions, quick_definitions)
        return node

    def verify(self) -> None:
        for node in self._doubles:
            for expectation in node._expectations():
                expectation.verify()

    def teardown(self) -> None:
        for node in self._partials.values():
            node._restore()
        logger.debug("tore down %d doubles", len(self._doubles))
        self._partials.clear()
        self._doubles.clear()

    def _vivify(self, parent: Double, segment: Segment) -> Double:
        name = self.config.child_name(parent._name, segment.text)
        child = Double(name, self)
        self._doubles.append(child)
        return child

    def _anonymous_name(self) -> str:
        self._anonymous += 1
        return f"double#{self._anonymous}"

    def __enter__(self) -> DoubleContainer:
        self._tokens.append(set_current_container(self))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        reset_current_container(self._tokens.pop())
        try:
            if exc_type is None and self.config.verify_on_teardown:
                self.verify()
        finally:
            self.teardown()


def _define(
    node: Double,
    definitions: Mapping[str, object] | None,
    quick_definitions: Mapping[str, object],
) -> None:
    merged = {**(definitions or {}), **quick_definitions}
    if merged:
        node.should_receive(merged)


def current_container() -> DoubleContainer:
    container = _CURRENT_CONTAINER.get()
    if container is None:
        raise UsageError(
            "no active DoubleContainer; use the 'doubles' fixture or "
            "'with DoubleContainer():'"
        )
    return container


def set_current_container(
    container: DoubleContainer | None,
) -> Token[DoubleContainer | None]:
    return _CURRENT_CONTAINER.set(container)


def reset_current_container(token: Token[DoubleContainer | None]) -> None:
    _CURRENT_CONTAINER.reset(token)


@contextmanager
def container_scope(container: DoubleContainer) -> Iterator[DoubleContainer]:
    token = set_current_container(container)
    try:
        yield container
    finally:
        reset_current_container(token)


def double(
    name: str | None = None,
    definitions: Mapping[str, object] | None = None,
    /,
    **quick_definitions: object,
) -> Double:
    return current_container().double(name, definitions, **quick_definitions)


def partial(
    target: object,
    name: str | None = None,
    definitions: Mapping[str, object] | None = None,
    /,
    **quick_definitions: object,
) -> PartialDouble:
    return current_container().partial(target, name, definitions, **quick_definitions)
