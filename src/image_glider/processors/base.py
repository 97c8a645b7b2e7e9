"""処理クラス共通の型と実行ヘルパー。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Union

from loguru import logger

from ..codec import DEFAULT_QUALITY
from ..results import BatchResult, OperationResult

PathLike = Union[str, Path]


class ImageProcessor(Protocol):
    """入力1件を出力1件へ変換する最小限のインターフェース。"""

    def process_image(
        self,
        source_path: PathLike,
        target_path: PathLike,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult: ...


def execute(
    source_path: PathLike,
    target_path: PathLike,
    action: Callable[[Path, Path], None],
    *,
    label: str,
) -> OperationResult:
    """action を実行し、例外を失敗結果へ変換する。

    action が投げた ValueError は検証エラー、OSError 系は I/O エラーとして分類される。
    """
    source = Path(source_path)
    target = Path(target_path)
    try:
        action(source, target)
    except Exception as e:
        result = OperationResult.from_exception(source, target, e)
        logger.error(f"{label}に失敗しました: {source.name}: {result.error} [{result.error_category}]")
        return result
    logger.info(f"{label}: {source.name} → {target.name}")
    return OperationResult.ok(source, target)


def validation_failure(source_path: PathLike, target_path: PathLike, message: str, *, label: str) -> OperationResult:
    """I/O 前の検証で弾いた場合の失敗結果。"""
    logger.error(f"{label}: {message}")
    return OperationResult.failed(Path(source_path), Path(target_path), message, "validation")


def rejected_batch(message: str, *, label: str) -> BatchResult:
    """引数の検証で一括処理全体を弾いた場合の結果。ディレクトリには一切触れない。"""
    logger.error(f"{label}: {message}")
    return BatchResult(error_message=message)
