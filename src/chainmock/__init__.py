"""chainmock package root."""

from chainmock.container import (
    DoubleContainer,
    container_scope,
    current_container,
    double,
    partial,
)
from chainmock.doubles import Double, PartialDouble
from chainmock.exceptions import (
    CallCountError,
    ChainMockError,
    ConflictingDeclarationError,
    ExpectationError,
    MalformedPathError,
    UnexpectedCallError,
    UsageError,
)
from chainmock.expectation import Behavior, Expectation, ExpectationGroup
from chainmock.matchers import ANY, instance_of, predicate
from chainmock.paths import ChainPath, Segment, SegmentKind, parse

__all__ = [
    "__version__",
    "ANY",
    "Behavior",
    "CallCountError",
    "ChainMockError",
    "ChainPath",
    "ConflictingDeclarationError",
    "Double",
    "DoubleContainer",
    "Expectation",
    "ExpectationError",
    "ExpectationGroup",
    "MalformedPathError",
    "PartialDouble",
    "Segment",
    "SegmentKind",
    "UnexpectedCallError",
    "UsageError",
    "container_scope",
    "current_container",
    "double",
    "instance_of",
    "parse",
    "partial",
    "predicate",
]

__version__ = "0.1.0"
