"""明るさ・コントラスト・彩度・色相とガンマ補正の適用。

明るさ・コントラスト・彩度は Pillow の ImageEnhance、色相は HSV の H チャンネル回転で行う。
ガンマは `channel ** (1 / gamma)` をルックアップテーブルにして最後に適用する。
アルファチャンネルは一切変更しない。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from PIL import Image, ImageEnhance

from .validators import ValueValidator

_EPSILON = 0.01


@dataclass(frozen=True)
class ToneAdjustment:
    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    hue: float = 0.0
    gamma: float = 1.0

    def clamped(self) -> "ToneAdjustment":
        """各値を許容範囲へ丸めたコピーを返す（拒否はしない）。"""
        return replace(
            self,
            brightness=ValueValidator.clamp(self.brightness, "brightness"),
            contrast=ValueValidator.clamp(self.contrast, "contrast"),
            saturation=ValueValidator.clamp(self.saturation, "saturation"),
            hue=ValueValidator.clamp(self.hue, "hue"),
            gamma=ValueValidator.clamp(self.gamma, "gamma"),
        )

    @property
    def is_neutral(self) -> bool:
        return (
            abs(self.brightness) <= _EPSILON
            and abs(self.contrast) <= _EPSILON
            and abs(self.saturation) <= _EPSILON
            and abs(self.hue) <= _EPSILON
            and abs(self.gamma - 1.0) <= _EPSILON
        )


def gamma_curve(value: float, gamma: float) -> float:
    """正規化済みの値 (0.0-1.0) にガンマ曲線を適用する。"""
    return value ** (1.0 / gamma)


def gamma_lut(gamma: float) -> list[int]:
    """8bit 各階調に対するガンマ補正テーブル。"""
    return [int(round(255 * gamma_curve(level / 255, gamma))) for level in range(256)]


def apply_tone(image: Image.Image, adjustment: ToneAdjustment) -> Image.Image:
    """色調整を適用した新しい画像を返す。"""
    adj = adjustment.clamped()
    color, alpha = _split_alpha(image)

    if abs(adj.brightness) > _EPSILON:
        color = ImageEnhance.Brightness(color).enhance(1 + adj.brightness / 100)
    if abs(adj.contrast) > _EPSILON:
        color = ImageEnhance.Contrast(color).enhance(1 + adj.contrast / 100)
    if abs(adj.saturation) > _EPSILON and color.mode == "RGB":
        color = ImageEnhance.Color(color).enhance(1 + adj.saturation / 100)
    if abs(adj.hue) > _EPSILON and color.mode == "RGB":
        color = _rotate_hue(color, adj.hue)

    # ガンマは他の調整の後に適用する
    if abs(adj.gamma - 1.0) > _EPSILON:
        lut = gamma_lut(adj.gamma)
        color = Image.merge(color.mode, [band.point(lut) for band in color.split()])

    if alpha is not None:
        color = color.copy()
        color.putalpha(alpha)
    return color


def _split_alpha(image: Image.Image) -> tuple[Image.Image, Optional[Image.Image]]:
    if image.mode in ("RGB", "L"):
        return image, None
    if image.mode == "LA":
        return image.getchannel("L"), image.getchannel("A")
    if image.mode != "RGBA":
        has_alpha = "A" in image.getbands() or "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")
        if image.mode == "RGB":
            return image, None
    return image.convert("RGB"), image.getchannel("A")


def _rotate_hue(image: Image.Image, hue: float) -> Image.Image:
    offset = int(round(hue / 360 * 256)) % 256
    if offset == 0:
        return image
    h, s, v = image.convert("HSV").split()
    h = h.point([(level + offset) % 256 for level in range(256)])
    return Image.merge("HSV", (h, s, v)).convert("RGB")
