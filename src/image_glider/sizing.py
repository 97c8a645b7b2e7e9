"""出力サイズの解決（リサイズモード・サムネイル）。

入出力とも画素数の整数で扱い、I/O は一切行わない純粋関数のみを置く。
縮尺を掛けた軸は切り捨てで整数化する（例: 300x200 を幅100へ → 100x66）。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ResizeMode(Enum):
    """リサイズの振る舞い。"""

    KEEP_ASPECT_RATIO = "keep"
    STRETCH = "stretch"
    CROP = "crop"

    @classmethod
    def parse(cls, value: Union[str, "ResizeMode"]) -> "ResizeMode":
        """`keep` / `stretch` / `crop` や列挙名から変換する。未知の値は ValueError。"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        aliases = {
            "keep": cls.KEEP_ASPECT_RATIO,
            "keep_aspect_ratio": cls.KEEP_ASPECT_RATIO,
            "keepaspectratio": cls.KEEP_ASPECT_RATIO,
            "stretch": cls.STRETCH,
            "crop": cls.CROP,
        }
        if key not in aliases:
            raise ValueError(f"未知のリサイズモードです: {value}")
        return aliases[key]


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"無効なサイズです: {self.width}x{self.height}. 幅と高さは1以上が必要です")

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


def _require_positive(value: Optional[int], name: str) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"無効な{name}です: {value}. 1以上の正の整数が必要です")


def _scale_axis(length: int, numerator: int, denominator: int) -> int:
    # 0 になる極端な縮小は 1px に丸める
    return max(1, (length * numerator) // denominator)


def resolve_target_size(
    orig_width: int,
    orig_height: int,
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
    mode: Union[ResizeMode, str] = ResizeMode.KEEP_ASPECT_RATIO,
) -> Dimensions:
    """元サイズ・目標サイズ・モードから出力サイズを決める。

    Args:
        orig_width: 元画像の幅
        orig_height: 元画像の高さ
        target_width: 目標幅（省略可）
        target_height: 目標高さ（省略可）
        mode: リサイズモード

    Returns:
        Dimensions: 出力サイズ。CROP モードでは切り抜き前の中間サイズ（目標を覆う最小サイズ）。

    Raises:
        ValueError: 元サイズ・目標サイズが正でない場合、または CROP モードで幅と高さの
            どちらかが欠けている場合
    """
    mode = ResizeMode.parse(mode)
    _require_positive(orig_width, "元画像の幅")
    _require_positive(orig_height, "元画像の高さ")
    _require_positive(target_width, "目標幅")
    _require_positive(target_height, "目標高さ")

    if mode is ResizeMode.CROP:
        if target_width is None or target_height is None:
            raise ValueError("切り抜きモードでは幅と高さの両方を指定する必要があります")
        # 大きい方の倍率で目標を覆う
        if target_width * orig_height >= target_height * orig_width:
            return Dimensions(target_width, _scale_axis(orig_height, target_width, orig_width))
        return Dimensions(_scale_axis(orig_width, target_height, orig_height), target_height)

    if target_width is None and target_height is None:
        return Dimensions(orig_width, orig_height)

    if mode is ResizeMode.STRETCH:
        return Dimensions(
            target_width if target_width is not None else orig_width,
            target_height if target_height is not None else orig_height,
        )

    # KEEP_ASPECT_RATIO
    if target_width is not None and target_height is not None:
        # 小さい方の倍率を両軸に適用する
        if target_width * orig_height <= target_height * orig_width:
            return Dimensions(target_width, _scale_axis(orig_height, target_width, orig_width))
        return Dimensions(_scale_axis(orig_width, target_height, orig_height), target_height)
    if target_width is not None:
        return Dimensions(target_width, _scale_axis(orig_height, target_width, orig_width))
    assert target_height is not None
    return Dimensions(_scale_axis(orig_width, target_height, orig_height), target_height)


def thumbnail_size(orig_width: int, orig_height: int, max_size: int) -> Dimensions:
    """長辺を max_size に合わせたサムネイルサイズを返す（短辺は偶数丸め）。"""
    _require_positive(orig_width, "元画像の幅")
    _require_positive(orig_height, "元画像の高さ")
    if max_size <= 0:
        raise ValueError(f"無効なサムネイルサイズです: {max_size}. 1以上の正の整数が必要です")

    long_edge = max(orig_width, orig_height)

    def _round_half_even(length: int) -> int:
        quotient, remainder = divmod(length * max_size, long_edge)
        if 2 * remainder > long_edge or (2 * remainder == long_edge and quotient % 2):
            quotient += 1
        return max(1, quotient)

    if orig_width >= orig_height:
        return Dimensions(max_size, _round_half_even(orig_height))
    return Dimensions(_round_half_even(orig_width), max_size)
