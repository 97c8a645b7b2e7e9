"""9方向アンカーによる配置座標の計算。"""

from __future__ import annotations

from enum import Enum
from typing import Union

DEFAULT_MARGIN = 20


class AnchorPosition(Enum):
    TOP_LEFT = ("left", "top")
    TOP_CENTER = ("center", "top")
    TOP_RIGHT = ("right", "top")
    MIDDLE_LEFT = ("left", "middle")
    CENTER = ("center", "middle")
    MIDDLE_RIGHT = ("right", "middle")
    BOTTOM_LEFT = ("left", "bottom")
    BOTTOM_CENTER = ("center", "bottom")
    BOTTOM_RIGHT = ("right", "bottom")

    @classmethod
    def parse(cls, value: Union[str, "AnchorPosition"]) -> "AnchorPosition":
        """`BottomRight` / `bottom_right` / `bottom-right` を大文字小文字を問わず受け付ける。"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().replace("-", "").replace("_", "").replace(" ", "").lower()
        for member in cls:
            if member.name.replace("_", "").lower() == key:
                return member
        raise ValueError(f"未知の配置位置です: {value}")


def place(
    container_width: int,
    container_height: int,
    content_width: int,
    content_height: int,
    anchor: Union[AnchorPosition, str],
    margin: int = DEFAULT_MARGIN,
) -> tuple[int, int]:
    """コンテンツ左上の座標を返す。

    範囲外へのクランプは行わない。コンテンツが大きい場合は負の座標になり、
    はみ出た部分は合成時に切り取られる。
    """
    anchor = AnchorPosition.parse(anchor)
    horizontal, vertical = anchor.value

    if horizontal == "left":
        x = margin
    elif horizontal == "center":
        x = _half(container_width - content_width)
    else:
        x = container_width - content_width - margin

    if vertical == "top":
        y = margin
    elif vertical == "middle":
        y = _half(container_height - content_height)
    else:
        y = container_height - content_height - margin

    return x, y


def _half(value: int) -> int:
    # 負の値も 0 方向へ切り捨てる
    return -(-value // 2) if value < 0 else value // 2
