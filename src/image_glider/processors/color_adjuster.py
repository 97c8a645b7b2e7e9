"""色調整（明るさ・コントラスト・彩度・色相・ガンマ）。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..batch_runner import build_search_pattern, run_batch, suffixed_target
from ..codec import DEFAULT_QUALITY, open_image, save_image
from ..results import BatchResult, OperationResult
from ..tone_curve import ToneAdjustment, apply_tone
from ..validators import ValueValidator
from .base import PathLike, execute

ADJUSTED_SUFFIX = "_adjusted"


class ColorAdjuster:
    def adjust(
        self,
        source_path: PathLike,
        target_path: PathLike,
        adjustment: ToneAdjustment,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """範囲外の値は丸めてから適用する。"""
        adjustment = adjustment.clamped()
        quality = ValueValidator.clamp_quality(quality)

        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                adjusted = apply_tone(decoded.image, adjustment)
                save_image(decoded.with_image(adjusted), target, quality)

        return execute(source_path, target_path, _action, label="色調整")

    def process_image(self, source_path: PathLike, target_path: PathLike, quality: int = DEFAULT_QUALITY) -> OperationResult:
        return self.adjust(source_path, target_path, ToneAdjustment(), quality)

    def batch_adjust(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        adjustment: ToneAdjustment,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        adjustment = adjustment.clamped()
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.adjust(s, t, adjustment, quality),
            suffixed_target(ADJUSTED_SUFFIX),
            empty_is_error=True,
            label="一括色調整",
            **batch_options,
        )
