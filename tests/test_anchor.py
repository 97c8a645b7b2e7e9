from __future__ import annotations

import pytest

from image_glider.anchor import AnchorPosition, place


@pytest.mark.parametrize(
    ("anchor", "expected"),
    [
        (AnchorPosition.TOP_LEFT, (20, 20)),
        (AnchorPosition.TOP_CENTER, (75, 20)),
        (AnchorPosition.TOP_RIGHT, (130, 20)),
        (AnchorPosition.MIDDLE_LEFT, (20, 75)),
        (AnchorPosition.CENTER, (75, 75)),
        (AnchorPosition.MIDDLE_RIGHT, (130, 75)),
        (AnchorPosition.BOTTOM_LEFT, (20, 130)),
        (AnchorPosition.BOTTOM_CENTER, (75, 130)),
        (AnchorPosition.BOTTOM_RIGHT, (130, 130)),
    ],
)
def test_place_nine_anchors(anchor: AnchorPosition, expected: tuple[int, int]) -> None:
    assert place(200, 200, 50, 50, anchor, 20) == expected


def test_place_does_not_clamp_oversized_content() -> None:
    assert place(100, 100, 300, 50, AnchorPosition.BOTTOM_RIGHT, 20) == (-220, 30)
    assert place(100, 100, 300, 300, AnchorPosition.CENTER) == (-100, -100)


def test_place_uses_default_margin() -> None:
    assert place(100, 100, 10, 10, AnchorPosition.TOP_LEFT) == (20, 20)


@pytest.mark.parametrize("name", ["BottomRight", "bottom_right", "bottom-right", "BOTTOMRIGHT"])
def test_parse_accepts_common_spellings(name: str) -> None:
    assert AnchorPosition.parse(name) is AnchorPosition.BOTTOM_RIGHT


def test_parse_rejects_unknown_position() -> None:
    with pytest.raises(ValueError):
        AnchorPosition.parse("Somewhere")


def test_centered_odd_overflow_truncates_toward_zero() -> None:
    assert place(100, 100, 151, 151, AnchorPosition.CENTER) == (-25, -25)
    assert place(100, 100, 151, 20, AnchorPosition.BOTTOM_CENTER, 0) == (-25, 80)
    assert place(101, 101, 50, 50, AnchorPosition.CENTER) == (25, 25)
