"""ディレクトリ単位の一括処理ハーネス。

列挙 → 1件ずつ処理 → 失敗の隔離 → 集計 の流れをすべての一括操作で共有する。
1件の失敗が残りの処理を止めることはない。
"""

from __future__ import annotations

import fnmatch
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from loguru import logger
from tqdm import tqdm

from .results import BatchItemOutcome, BatchResult, OperationResult

PerFileOperation = Callable[[Path, Path], OperationResult]
TargetNamer = Callable[[Path, Path], Path]


def build_search_pattern(extension: Optional[str]) -> str:
    """拡張子（`jpg` / `.jpg`）またはワイルドカードから検索パターンを作る。空なら全ファイル。"""
    value = (extension or "").strip()
    if not value:
        return "*"
    if any(ch in value for ch in "*?["):
        return value
    return f"*.{value.lstrip('.')}"


def normalize_extensions(raw: Union[str, Iterable[str]]) -> list[str]:
    """`"jpg, .png, JPEG"` → `[".jpeg", ".jpg", ".png"]`"""
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    normalized = set()
    for item in items:
        value = item.strip().lower()
        if not value:
            continue
        normalized.add(value if value.startswith(".") else f".{value}")
    return sorted(normalized)


def discover_source_files(
    source_dir: Path,
    pattern: str = "*",
    *,
    recursive: bool = False,
    extensions: Optional[Iterable[str]] = None,
) -> list[Path]:
    """パターンに一致するファイルを大文字小文字を区別せずに列挙する。

    extensions を渡した場合はパターンに加えて拡張子でも絞り込む。
    """
    pattern_lc = pattern.lower()
    allowed = set(normalize_extensions(extensions)) if extensions is not None else None
    candidates = source_dir.rglob("*") if recursive else source_dir.iterdir()

    found = []
    for path in candidates:
        if not path.is_file():
            continue
        if not fnmatch.fnmatchcase(path.name.lower(), pattern_lc):
            continue
        if allowed is not None and path.suffix.lower() not in allowed:
            continue
        found.append(path)
    return sorted(found)


def suffixed_target(suffix: str, extension: Optional[str] = None) -> TargetNamer:
    """`name{suffix}.ext` を出力先にする命名関数を返す。"""

    def _namer(source: Path, output_dir: Path) -> Path:
        ext = extension if extension is not None else source.suffix
        return output_dir / f"{source.stem}{suffix}{ext}"

    return _namer


def same_name_target(source: Path, output_dir: Path) -> Path:
    """元と同じファイル名で出力する。"""
    return output_dir / source.name


def extension_target(extension: str) -> TargetNamer:
    """拡張子だけを差し替える命名関数を返す。"""
    ext = extension if extension.startswith(".") else f".{extension}"

    def _namer(source: Path, output_dir: Path) -> Path:
        return output_dir / f"{source.stem}{ext.lower()}"

    return _namer


def run_batch(
    source_dir: Union[str, Path],
    output_dir: Union[str, Path],
    pattern: str,
    per_file_op: PerFileOperation,
    target_namer: TargetNamer,
    *,
    empty_is_error: bool = True,
    recursive: bool = False,
    max_workers: int = 1,
    show_progress: bool = False,
    label: str = "処理中",
) -> BatchResult:
    """ディレクトリ内の一致ファイルすべてに per_file_op を適用して集計する。

    Args:
        source_dir: 入力ディレクトリ
        output_dir: 出力ディレクトリ（なければ作成）
        pattern: 検索パターン（`*.jpg` など、大文字小文字は区別しない）
        per_file_op: (入力パス, 出力パス) を受け取り OperationResult を返す処理
        target_namer: (入力パス, 出力ディレクトリ) から出力パスを決める関数
        empty_is_error: 一致ファイルが0件のとき error_message を設定するか
        recursive: サブディレクトリも対象にするか（出力側も同じ階層を作る）
        max_workers: 2以上でスレッドプールによる並列処理
        show_progress: tqdm の進捗バーを表示するか
        label: 進捗バーとログに出す処理名

    Returns:
        BatchResult: 集計結果。ディレクトリ単位の失敗は error_message に入る。
    """
    source_dir = Path(source_dir)
    output_dir = Path(output_dir)
    result = BatchResult()

    if not source_dir.is_dir():
        result.error_message = f"入力ディレクトリが存在しません: {source_dir}"
        logger.error(result.error_message)
        return result

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        result.error_message = f"出力ディレクトリを作成できません: {output_dir} ({e})"
        logger.error(result.error_message)
        return result

    files = discover_source_files(source_dir, pattern, recursive=recursive)
    if not files:
        message = f"一致するファイルがありません: {source_dir / pattern}"
        if empty_is_error:
            result.error_message = message
        logger.warning(message)
        return result

    result.total_files = len(files)
    logger.info(f"{label}: {len(files)} 件 ({source_dir} → {output_dir})")

    def _process(source: Path) -> BatchItemOutcome:
        target_dir = output_dir / source.parent.relative_to(source_dir)
        target = target_dir / source.name
        try:
            target = target_namer(source, target_dir)
            if target_dir != output_dir:
                target_dir.mkdir(parents=True, exist_ok=True)
            op_result = per_file_op(source, target)
        except Exception as e:
            logger.error(f"❌ {source.name}: {e}")
            return BatchItemOutcome(source, target, False, str(e) or type(e).__name__)
        if op_result.success:
            logger.debug(f"✔ {source.name} → {op_result.target_path.name}")
            return BatchItemOutcome(source, op_result.target_path, True)
        logger.error(f"❌ {source.name}: {op_result.error}")
        return BatchItemOutcome(source, op_result.target_path, False, op_result.error)

    with tqdm(total=len(files), desc=label, unit="files", disable=not show_progress) as progress:
        if max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [executor.submit(_process, source) for source in files]
                for future in as_completed(futures):
                    # 集計は呼び出し元スレッドのみで行う
                    result.record(future.result())
                    progress.update(1)
        else:
            for source in files:
                result.record(_process(source))
                progress.update(1)

    if result.failure_count:
        logger.warning(f"{label}: {result.failure_count} 件の画像が失敗しました")
    else:
        logger.success(f"{label}: すべての画像を処理しました（{result.success_count} 件）")
    return result
