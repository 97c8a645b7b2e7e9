"""
アップロードファイルの保存・出力パスの払い出し・ダウンロード対象の解決
"""
import uuid
from pathlib import Path
from typing import Callable, Optional

from fastapi import Depends, UploadFile
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from ..results import OperationResult
from ..validators import PathValidator
from .config import ApiSettings, get_settings
from .models import ApiError, ApiResponse

_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".webp": "image/webp",
    ".avif": "image/avif",
}


def media_type_for(path: Path) -> str:
    return _MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream")


class FileService:
    def __init__(self, settings: ApiSettings):
        self.settings = settings

    def normalize_extension(self, extension: str) -> str:
        """`png` / `.PNG` → `.png`。許可されていない拡張子は 400。"""
        ext = extension.strip().lower()
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in self.settings.allowed_extensions:
            raise ApiError(400, f"未対応の拡張子です: {extension}")
        return ext

    async def save_upload(self, upload: UploadFile) -> Path:
        """アップロードを source/<uuid><ext> に保存する。"""
        if upload is None or not upload.filename:
            raise ApiError(400, "ファイルが指定されていません")
        ext = self.normalize_extension(Path(upload.filename).suffix or "")

        content = await upload.read()
        if not content:
            raise ApiError(400, "ファイルが空です")
        if len(content) > self.settings.max_upload_bytes:
            raise ApiError(400, f"ファイルサイズが上限({self.settings.max_upload_bytes} bytes)を超えています")

        self.settings.source_dir.mkdir(parents=True, exist_ok=True)
        path = self.settings.source_dir / f"{uuid.uuid4().hex}{ext}"
        path.write_bytes(content)
        logger.debug(f"アップロード保存: {upload.filename} → {path.name} ({len(content)} bytes)")
        return path

    def new_output_path(self, extension: str) -> Path:
        ext = extension if extension.startswith(".") else f".{extension}"
        self.settings.output_dir.mkdir(parents=True, exist_ok=True)
        return self.settings.output_dir / f"{uuid.uuid4().hex}{ext.lower()}"

    def delete(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"一時ファイルの削除に失敗: {path} ({e})")

    def resolve_download(self, file_name: str) -> Path:
        """出力ディレクトリ直下のファイルのみを返す。"""
        try:
            PathValidator.validate_filename(file_name)
        except ValueError as e:
            raise ApiError(400, str(e))
        path = self.settings.output_dir / file_name
        if not path.is_file():
            raise ApiError(404, f"ファイルが見つかりません: {file_name}")
        return path

    async def process(
        self,
        upload: UploadFile,
        operation: Callable[[Path, Path], OperationResult],
        target_extension: Optional[str] = None,
    ) -> ApiResponse:
        """アップロードを保存して operation を実行し、出力ファイル名を返す。"""
        source = await self.save_upload(upload)
        target = self.new_output_path(target_extension or source.suffix)
        try:
            result = await run_in_threadpool(operation, source, target)
        finally:
            self.delete(source)

        if not result.success:
            self.delete(target)
            raise ApiError(400, result.error or "処理に失敗しました")
        return ApiResponse.ok(data=target.name)


def get_file_service(settings: ApiSettings = Depends(get_settings)) -> FileService:
    return FileService(settings)
