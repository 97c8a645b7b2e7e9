"""
HTTP API の設定（環境変数 IMAGE_GLIDER_* / .env で上書き可能）
"""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class ApiSettings(BaseSettings):
    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # Storage
    work_dir: Path = Path.cwd() / "wwwroot"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB
    allowed_extensions: set[str] = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".webp"}
    download_max_age: int = 3600

    # Processing
    default_quality: int = 90

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "IMAGE_GLIDER_"

    @property
    def source_dir(self) -> Path:
        return self.work_dir / "source"

    @property
    def output_dir(self) -> Path:
        return self.work_dir / "output"


@lru_cache()
def get_settings() -> ApiSettings:
    return ApiSettings()
