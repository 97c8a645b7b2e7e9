"""切り抜き指定（絶対座標・パーセント・中央）を検証済みの矩形へ変換する。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


class CropValidationError(ValueError):
    """切り抜き指定が画像の範囲や値の制約を満たさない。"""


@dataclass(frozen=True)
class CropRectangle:
    x: int
    y: int
    width: int
    height: int

    def as_box(self) -> tuple[int, int, int, int]:
        """Pillow の `Image.crop` に渡す (left, upper, right, lower) を返す。"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class AbsoluteCrop:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class PercentCrop:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CenteredCrop:
    width: int
    height: int


CropIntent = Union[AbsoluteCrop, PercentCrop, CenteredCrop]


def resolve_crop(source_width: int, source_height: int, intent: CropIntent) -> CropRectangle:
    """切り抜き指定を元画像サイズに対して解決する。

    絶対座標とパーセントは範囲外を拒否し、中央指定は画像に収まるよう縮める。

    Raises:
        CropValidationError: 指定が不正、または画像の範囲を超える場合
    """
    if source_width <= 0 or source_height <= 0:
        raise CropValidationError(f"無効な画像サイズです: {source_width}x{source_height}")

    if isinstance(intent, AbsoluteCrop):
        rect = _resolve_absolute(source_width, source_height, intent)
    elif isinstance(intent, PercentCrop):
        rect = _resolve_percent(source_width, source_height, intent)
    elif isinstance(intent, CenteredCrop):
        rect = _resolve_centered(source_width, source_height, intent)
    else:
        raise CropValidationError(f"未知の切り抜き指定です: {intent!r}")

    _assert_within(source_width, source_height, rect)
    return rect


def _resolve_absolute(source_width: int, source_height: int, intent: AbsoluteCrop) -> CropRectangle:
    if intent.x < 0 or intent.y < 0 or intent.width <= 0 or intent.height <= 0:
        raise CropValidationError(
            f"切り抜き範囲が不正です: x={intent.x}, y={intent.y}, width={intent.width}, height={intent.height}"
        )
    if intent.x >= source_width or intent.y >= source_height:
        raise CropValidationError(
            f"切り抜きの開始位置が画像の範囲外です: ({intent.x}, {intent.y}) / 画像 {source_width}x{source_height}"
        )
    if intent.x + intent.width > source_width or intent.y + intent.height > source_height:
        raise CropValidationError(
            f"切り抜き範囲が画像をはみ出しています: "
            f"{intent.x}+{intent.width}, {intent.y}+{intent.height} / 画像 {source_width}x{source_height}"
        )
    return CropRectangle(intent.x, intent.y, intent.width, intent.height)


def _resolve_percent(source_width: int, source_height: int, intent: PercentCrop) -> CropRectangle:
    values = (intent.x, intent.y, intent.width, intent.height)
    if any(v < 0 or v > 100 for v in values):
        raise CropValidationError(f"パーセント値は0から100の範囲で指定してください: {values}")
    if intent.width <= 0 or intent.height <= 0:
        raise CropValidationError("切り抜きの幅と高さのパーセントは0より大きい値が必要です")
    if intent.x + intent.width > 100 or intent.y + intent.height > 100:
        raise CropValidationError(
            f"切り抜き範囲が100%を超えています: x+width={intent.x + intent.width}, y+height={intent.y + intent.height}"
        )

    # 切り捨てで画素へ換算し、絶対座標として再検証する
    pixel_intent = AbsoluteCrop(
        x=int(source_width * intent.x / 100),
        y=int(source_height * intent.y / 100),
        width=int(source_width * intent.width / 100),
        height=int(source_height * intent.height / 100),
    )
    return _resolve_absolute(source_width, source_height, pixel_intent)


def _resolve_centered(source_width: int, source_height: int, intent: CenteredCrop) -> CropRectangle:
    if intent.width <= 0 or intent.height <= 0:
        raise CropValidationError(f"切り抜きサイズが不正です: {intent.width}x{intent.height}")
    return CropRectangle(
        x=max(0, (source_width - intent.width) // 2),
        y=max(0, (source_height - intent.height) // 2),
        width=min(intent.width, source_width),
        height=min(intent.height, source_height),
    )


def _assert_within(source_width: int, source_height: int, rect: CropRectangle) -> None:
    if (
        rect.x < 0
        or rect.y < 0
        or rect.width <= 0
        or rect.height <= 0
        or rect.x + rect.width > source_width
        or rect.y + rect.height > source_height
    ):
        raise CropValidationError(f"切り抜き矩形が画像の範囲外です: {rect}")
