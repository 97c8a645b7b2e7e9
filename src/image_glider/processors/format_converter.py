"""形式変換（出力先の拡張子で形式が決まる）。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..batch_runner import build_search_pattern, extension_target, run_batch
from ..codec import DEFAULT_QUALITY, format_for_path, open_image, save_image
from ..results import BatchResult, OperationResult
from .base import PathLike, execute, validation_failure


class FormatConverter:
    def convert(self, source_path: PathLike, target_path: PathLike, quality: int = DEFAULT_QUALITY) -> OperationResult:
        try:
            format_for_path(target_path)
        except ValueError as e:
            return validation_failure(source_path, target_path, str(e), label="形式変換")

        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                save_image(decoded, target, quality)

        return execute(source_path, target_path, _action, label="形式変換")

    process_image = convert

    def batch_convert(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        target_extension: str,
        quality: int = DEFAULT_QUALITY,
        source_extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        """source_extension に一致するファイルを target_extension の形式へ変換する。

        Raises:
            ValueError: target_extension が未対応の形式の場合
        """
        namer = extension_target(target_extension)
        format_for_path(namer(Path("sample"), Path(".")))
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(source_extension),
            lambda s, t: self.convert(s, t, quality),
            namer,
            empty_is_error=False,
            label="一括形式変換",
            **batch_options,
        )
