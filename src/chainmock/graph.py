"""The double graph: doubles connected by named method edges.

An edge is the list of expectations recorded for one method name on one
double. Its role is set by the first of them: when that expectation always
returns a single double the edge passes through to it, otherwise the name is
terminal. Vivified and author-supplied children are recorded as exactly such
an expectation, so calling ``parent.name()`` yields the child.

The role is stored on the edge and updated as behaviours are declared. Once a
declaration has chained through an edge it is fixed as a pass-through; later
changes may only swap its target.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from chainmock.conflicts import require_pass_through, require_unchained
from chainmock.paths import ChainPath, Segment

if TYPE_CHECKING:
    from chainmock.doubles import Double
    from chainmock.expectation import Expectation

logger = logging.getLogger(__name__)


class EdgeRole(str, Enum):
    PASS_THROUGH = "pass-through"
    TERMINAL = "terminal"


@dataclass
class Edge:
    name: str
    expectations: list[Expectation] = field(default_factory=list)
    target: Double | None = None
    chained: bool = False

    @property
    def primary(self) -> Expectation:
        return self.expectations[0]

    @property
    def role(self) -> EdgeRole:
        if self.target is None:
            return EdgeRole.TERMINAL
        return EdgeRole.PASS_THROUGH


def edge_for(node: Double, method_name: str) -> Edge | None:
    return node._edges.get(method_name)


def resolve(root: Double, path: ChainPath) -> tuple[Double, Segment]:
    """Walk every segment but the last, vivifying missing intermediates.

    Returns the double on which the final segment is to be attached. A
    terminal edge met along the way raises ConflictingDeclarationError;
    doubles vivified before that point stay in place. Every edge walked is
    marked as chained.
    """
    node = root
    for segment in path.prefix:
        edge = edge_for(node, segment.method_name)
        if edge is None:
            edge = _vivify(node, segment)
        child = require_pass_through(node, edge)
        edge.chained = True
        node = child
    return node, path.final


def lookup(root: Double, path: ChainPath) -> Double | None:
    """Return the double reached by following ``path`` through pass-through
    edges, without creating anything."""
    node: Double | None = root
    for segment in path.segments:
        if node is None:
            return None
        edge = edge_for(node, segment.method_name)
        node = None if edge is None else edge.target
    return node


def set_child(node: Double, method_name: str, child: Double) -> Expectation:
    """Make ``method_name`` on ``node`` pass through to ``child``.

    An existing pass-through edge is re-targeted; a terminal one conflicts.
    """
    edge = edge_for(node, method_name)
    if edge is None:
        expectation = node._record_expectation(method_name)
        mark_terminal(node, method_name, expectation)
        return expectation.and_return(child)
    require_pass_through(node, edge)
    return edge.primary.and_return(child)


def mark_terminal(node: Double, method_name: str, expectation: Expectation) -> Edge:
    """Register ``expectation`` under ``method_name``, creating the edge.

    An edge that already passes through keeps that role: the new expectation
    is appended behind its primary one.
    """
    edge = node._edges.get(method_name)
    if edge is None:
        edge = Edge(method_name, target=expectation.returned_double())
        node._edges[method_name] = edge
    edge.expectations.append(expectation)
    return edge


def behavior_changed(expectation: Expectation, child: Double | None) -> None:
    """Bring an edge in line with a new behaviour for one of its expectations.

    Called before the behaviour is stored. ``child`` is the double the
    expectation will always return, or None when it will not. For the
    primary expectation this sets the edge's role and target; a chained edge
    refuses to become terminal. A later expectation that accepts any
    arguments and returns a double re-targets the edge the way
    :func:`set_child` does and takes over as primary.
    """
    node = expectation.double
    edge = edge_for(node, expectation.method_name)
    if edge is None or not any(e is expectation for e in edge.expectations):
        return
    if expectation is edge.primary:
        if child is None:
            require_unchained(node, edge)
        _retarget(node, edge, child)
        return
    if child is None or not expectation.accepts_any_args():
        return
    require_pass_through(node, edge)
    edge.primary._returns(child)
    edge.expectations.remove(expectation)
    edge.expectations.insert(0, expectation)
    _retarget(node, edge, child)


def _retarget(node: Double, edge: Edge, child: Double | None) -> None:
    previous, edge.target = edge.target, child
    if previous is not None and previous is not child:
        logger.debug("re-targeted %r.%s: %r -> %r", node, edge.name, previous, child)
    elif previous is None and child is not None:
        logger.debug("wired %r.%s -> %r", node, edge.name, child)


def _vivify(node: Double, segment: Segment) -> Edge:
    child = node._container._vivify(node, segment)
    set_child(node, segment.method_name, child)
    logger.debug("vivified %r for segment %r of %r", child, segment.text, node)
    return node._edges[segment.method_name]
