from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

from chainmock.exceptions import MalformedPathError
from chainmock.operators import is_operator, special_method_for

SEPARATOR = "."

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*[?!=]?")


class SegmentKind(str, Enum):
    PLAIN = "plain"
    PREDICATE = "predicate"
    BANG = "bang"
    ASSIGNMENT = "assignment"
    OPERATOR = "operator"


_SUFFIX_KINDS: dict[str, SegmentKind] = {
    "?": SegmentKind.PREDICATE,
    "!": SegmentKind.BANG,
    "=": SegmentKind.ASSIGNMENT,
}


@dataclass(frozen=True)
class Segment:
    text: str
    kind: SegmentKind

    @property
    def method_name(self) -> str:
        """Key of this segment in a double's edge table."""
        if self.kind is SegmentKind.OPERATOR:
            return special_method_for(self.text)
        return self.text

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ChainPath:
    text: str
    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise MalformedPathError(self.text, reason="path has no segments")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(segment.text for segment in self.segments)

    @property
    def prefix(self) -> tuple[Segment, ...]:
        return self.segments[:-1]

    @property
    def final(self) -> Segment:
        return self.segments[-1]

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.text


def classify_segment(text: str) -> SegmentKind | None:
    """Return the kind of a single segment, or None if it is not valid."""
    if is_operator(text):
        return SegmentKind.OPERATOR
    if _IDENTIFIER_RE.fullmatch(text) is None:
        return None
    return _SUFFIX_KINDS.get(text[-1], SegmentKind.PLAIN)


def parse(text: str) -> ChainPath:
    """Split a dotted method path into validated segments.

    Nothing is returned unless every segment is valid, so callers can parse
    before touching any double.
    """
    if not isinstance(text, str):
        raise MalformedPathError(repr(text), reason="path must be a string")
    if not text:
        raise MalformedPathError(text, reason="path is empty")
    segments: list[Segment] = []
    for position, raw in enumerate(text.split(SEPARATOR)):
        if not raw:
            raise MalformedPathError(
                text, reason=f"empty segment at position {position}"
            )
        kind = classify_segment(raw)
        if kind is None:
            raise MalformedPathError(text, reason=f"invalid segment {raw!r}")
        segments.append(Segment(raw, kind))
    return ChainPath(text, tuple(segments))


def is_valid_path(text: str) -> bool:
    try:
        parse(text)
    except MalformedPathError:
        return False
    return True
