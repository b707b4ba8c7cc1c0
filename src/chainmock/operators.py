"""Operator method names addressable as chain segments.

The table is the complete callable-operator surface of a double: every key
may appear as a bare path segment, and ``Double`` defines exactly the special
methods listed as values. It is fixed data, never derived by introspection.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

UNARY_OPERATORS: frozenset[str] = frozenset({"+@", "-@", "~"})

OPERATOR_METHODS: Mapping[str, str] = MappingProxyType(
    {
        "+@": "__pos__",
        "-@": "__neg__",
        "~": "__invert__",
        "+": "__add__",
        "-": "__sub__",
        "*": "__mul__",
        "/": "__truediv__",
        "//": "__floordiv__",
        "%": "__mod__",
        "**": "__pow__",
        "@": "__matmul__",
        "&": "__and__",
        "|": "__or__",
        "^": "__xor__",
        "<<": "__lshift__",
        ">>": "__rshift__",
        "==": "__eq__",
        "!=": "__ne__",
        "<": "__lt__",
        "<=": "__le__",
        ">": "__gt__",
        ">=": "__ge__",
        "[]": "__getitem__",
        "[]=": "__setitem__",
        "()": "__call__",
    }
)

SPECIAL_METHOD_OPERATORS: Mapping[str, str] = MappingProxyType(
    {method: symbol for symbol, method in OPERATOR_METHODS.items()}
)

BINARY_METHODS: frozenset[str] = frozenset(
    method
    for symbol, method in OPERATOR_METHODS.items()
    if symbol not in UNARY_OPERATORS
    and method not in {"__getitem__", "__setitem__", "__call__"}
)


def is_operator(text: str) -> bool:
    return text in OPERATOR_METHODS


def special_method_for(symbol: str) -> str:
    return OPERATOR_METHODS[symbol]
