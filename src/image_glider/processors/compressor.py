"""圧縮レベル指定での再エンコード。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..batch_runner import build_search_pattern, run_batch, same_name_target
from ..codec import format_for_path, open_image, save_image
from ..results import BatchResult, OperationResult
from ..validators import ValueValidator
from .base import PathLike, execute

DEFAULT_COMPRESSION_LEVEL = 75


def png_compress_level(level: int) -> int:
    """圧縮レベル(1-100、高いほど高品質)を PNG の compress_level(1-9) に変換する。"""
    return max(1, min(9, 10 - level // 11))


class ImageCompressor:
    """圧縮レベル 1-100 で再エンコードする。出力ファイル名は元と同じ。"""

    def compress(
        self,
        source_path: PathLike,
        target_path: PathLike,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        preserve_metadata: bool = False,
    ) -> OperationResult:
        level = ValueValidator.clamp_compression_level(compression_level)

        def _action(source: Path, target: Path) -> None:
            output_format = format_for_path(target)
            with open_image(source) as decoded:
                save_image(
                    decoded,
                    target,
                    quality=level,
                    compress_level=png_compress_level(level) if output_format == "PNG" else None,
                    keep_metadata=preserve_metadata,
                )

        return execute(source_path, target_path, _action, label="圧縮")

    def process_image(self, source_path: PathLike, target_path: PathLike, quality: int = DEFAULT_COMPRESSION_LEVEL) -> OperationResult:
        return self.compress(source_path, target_path, quality)

    def batch_compress(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        preserve_metadata: bool = False,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.compress(s, t, compression_level, preserve_metadata),
            same_name_target,
            empty_is_error=False,
            label="一括圧縮",
            **batch_options,
        )
