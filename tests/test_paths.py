from __future__ import annotations

import pytest

from chainmock.exceptions import MalformedPathError, UsageError
from chainmock.operators import OPERATOR_METHODS
from chainmock.paths import ChainPath, Segment, SegmentKind, classify_segment, is_valid_path, parse


@pytest.mark.parametrize(
    "text",
    ["a(2)", "0a", "a-b", "a b", " ", "a ", " b", "a!b", "a?b", "a=b", "a?!", "a.", ".a", "a..b", ""],
)
def test_parse_rejects_ill_formed_paths(text: str) -> None:
    with pytest.raises(MalformedPathError) as exc_info:
        parse(text)
    assert exc_info.value.path == text
    assert isinstance(exc_info.value, UsageError)


@pytest.mark.parametrize("text", ["a", "a?", "a!", "a=", "z0", "save!", "_private", "__pos__"])
def test_parse_accepts_well_formed_single_segments(text: str) -> None:
    chain = parse(text)
    assert chain.names == (text,)
    assert chain.final.text == text


def test_parse_reproduces_segment_sequence() -> None:
    chain = parse("chassis.axle.universal_joint.cog.turn")
    assert chain.names == ("chassis", "axle", "universal_joint", "cog", "turn")
    assert [segment.text for segment in chain.prefix] == [
        "chassis",
        "axle",
        "universal_joint",
        "cog",
    ]
    assert chain.final == Segment("turn", SegmentKind.PLAIN)
    assert str(chain) == "chassis.axle.universal_joint.cog.turn"
    assert len(chain) == 5


def test_segment_kinds_follow_trailing_character() -> None:
    chain = parse("ready?.save!.value=.plain")
    assert [segment.kind for segment in chain.segments] == [
        SegmentKind.PREDICATE,
        SegmentKind.BANG,
        SegmentKind.ASSIGNMENT,
        SegmentKind.PLAIN,
    ]


def test_operator_segments_map_to_special_methods() -> None:
    chain = parse("children.+@.[].==")
    assert [segment.kind for segment in chain.segments] == [
        SegmentKind.PLAIN,
        SegmentKind.OPERATOR,
        SegmentKind.OPERATOR,
        SegmentKind.OPERATOR,
    ]
    assert [segment.method_name for segment in chain.segments] == [
        "children",
        "__pos__",
        "__getitem__",
        "__eq__",
    ]


def test_every_operator_is_a_valid_segment() -> None:
    for symbol, method_name in OPERATOR_METHODS.items():
        assert classify_segment(symbol) is SegmentKind.OPERATOR
        assert parse(f"a.{symbol}").final.method_name == method_name


def test_operator_lookalikes_are_rejected() -> None:
    for text in ("+@@", "===", "<=>", "!", "=~", "[", "(2)"):
        assert classify_segment(text) is None
        assert not is_valid_path(text)


def test_parse_rejects_non_string() -> None:
    with pytest.raises(MalformedPathError):
        parse(42)  # type: ignore[arg-type]


def test_chain_path_requires_segments() -> None:
    with pytest.raises(MalformedPathError):
        ChainPath("", ())


def test_malformed_path_message_names_path_and_segment() -> None:
    with pytest.raises(MalformedPathError) as exc_info:
        parse("good.0bad.fine")
    message = str(exc_info.value)
    assert "good.0bad.fine" in message
    assert "'0bad'" in message
