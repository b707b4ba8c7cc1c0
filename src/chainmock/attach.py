from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from chainmock.expectation import Behavior, Expectation, ExpectationGroup
from chainmock.graph import mark_terminal, resolve, set_child
from chainmock.paths import ChainPath, Segment, parse

if TYPE_CHECKING:
    from chainmock.doubles import Double

logger = logging.getLogger(__name__)


def attach(
    parent: Double, final: Segment, behavior: Behavior | None = None
) -> Expectation:
    """Record the expectation for the final segment of a resolved path.

    A behaviour that returns a double wires a pass-through edge instead, so
    later declarations can chain through that double's own edges.
    """
    method_name = final.method_name
    if behavior is not None:
        child = behavior.returned_double()
        if child is not None:
            expectation = set_child(parent, method_name, child)
            return behavior.apply(expectation)
    expectation = parent._record_expectation(method_name)
    mark_terminal(parent, method_name, expectation)
    if behavior is not None:
        behavior.apply(expectation)
    return expectation


def declare(
    root: Double, path: str | ChainPath, behavior: Behavior | None = None
) -> Expectation:
    chain = path if isinstance(path, ChainPath) else parse(path)
    parent, final = resolve(root, chain)
    logger.debug("declaring %s on %r via %r", chain, root, parent)
    return attach(parent, final, behavior)


def attach_values(root: Double, definitions: Mapping[str, object]) -> ExpectationGroup:
    """Quick definitions: every path always returns its mapped value.

    All paths are parsed before the first one is attached, so a malformed key
    leaves the graph untouched.
    """
    parsed = [(parse(text), value) for text, value in definitions.items()]
    expectations = [
        declare(root, chain, Behavior.returning(value)) for chain, value in parsed
    ]
    return ExpectationGroup(expectations)
