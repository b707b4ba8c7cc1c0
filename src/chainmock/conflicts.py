"""Role checks for chained declarations.

A method name on a double is either terminal or a pass-through to another
double. Checks run while a declaration walks through a name and when the
behaviour deciding a name's role is replaced, in declaration order; a
terminal declared after a pass-through on the same name is not reported.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chainmock.exceptions import ConflictingDeclarationError
from chainmock.operators import SPECIAL_METHOD_OPERATORS

if TYPE_CHECKING:
    from chainmock.doubles import Double
    from chainmock.graph import Edge

logger = logging.getLogger(__name__)


def require_pass_through(node: Double, edge: Edge) -> Double:
    """Return the edge's target double, or raise if the name is terminal."""
    target = edge.target
    if target is None:
        logger.debug("conflict on %r.%s: already terminal", node, edge.name)
        raise ConflictingDeclarationError(
            _display_name(edge.name), double_name=node._name
        )
    return target


def _display_name(method_name: str) -> str:
    return SPECIAL_METHOD_OPERATORS.get(method_name, method_name)


def require_unchained(node: Double, edge: Edge) -> None:
    """Raise if a declaration has already chained through the edge.

    Such an edge stays a pass-through for good; only its target may change.
    """
    if edge.chained:
        logger.debug("conflict on %r.%s: already chained through", node, edge.name)
        raise ConflictingDeclarationError(
            _display_name(edge.name), double_name=node._name
        )
