"""単体処理・一括処理の結果型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .codec import analyze_file_error


@dataclass(frozen=True)
class OperationResult:
    success: bool
    source_path: Path
    target_path: Path
    error: Optional[str] = None
    error_category: Optional[str] = None
    retryable: bool = False
    error_guidance: Optional[str] = None

    @classmethod
    def ok(cls, source_path: Path, target_path: Path) -> "OperationResult":
        return cls(success=True, source_path=Path(source_path), target_path=Path(target_path))

    @classmethod
    def failed(
        cls,
        source_path: Path,
        target_path: Path,
        error: str,
        error_category: str = "validation",
    ) -> "OperationResult":
        return cls(
            success=False,
            source_path=Path(source_path),
            target_path=Path(target_path),
            error=error,
            error_category=error_category,
        )

    @classmethod
    def from_exception(cls, source_path: Path, target_path: Path, error: BaseException) -> "OperationResult":
        """例外を分類して失敗結果にする。"""
        _code, category, retryable, guidance = analyze_file_error(error)
        return cls(
            success=False,
            source_path=Path(source_path),
            target_path=Path(target_path),
            error=str(error) or type(error).__name__,
            error_category=category,
            retryable=retryable,
            error_guidance=guidance,
        )


@dataclass(frozen=True)
class BatchItemOutcome:
    source_path: Path
    target_path: Path
    success: bool
    error_message: Optional[str] = None


@dataclass
class BatchResult:
    """一括処理の集計結果。

    ファイル走査まで到達した場合は常に
    `success_count + failure_count == total_files` が成り立つ。
    """

    total_files: int = 0
    success_count: int = 0
    failure_count: int = 0
    successful_paths: list[Path] = field(default_factory=list)
    failed_paths: list[Path] = field(default_factory=list)
    outcomes: list[BatchItemOutcome] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.error_message is None and self.failure_count == 0

    def record(self, outcome: BatchItemOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.success:
            self.success_count += 1
            self.successful_paths.append(outcome.source_path)
        else:
            self.failure_count += 1
            self.failed_paths.append(outcome.source_path)

    def failed_files(self) -> list[dict[str, str]]:
        return [
            {"file": str(o.source_path), "error": o.error_message or ""}
            for o in self.outcomes
            if not o.success
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "successful_files": [p.name for p in self.successful_paths],
            "failed_files": [p.name for p in self.failed_paths],
            "error_message": self.error_message,
            "is_success": self.is_success,
        }
