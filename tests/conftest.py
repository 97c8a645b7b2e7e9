"""
pytest設定ファイル
共通のフィクスチャやテスト設定を定義
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from loguru import logger
from PIL import Image


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """ログ・設定ファイルの保存先をテストごとの一時ディレクトリへ向ける"""
    monkeypatch.setenv("IMAGE_GLIDER_LOG_DIR", str(tmp_path / "_logs"))
    monkeypatch.setenv("IMAGE_GLIDER_CONFIG_DIR", str(tmp_path / "_config"))
    yield
    logger.remove()


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """指定サイズ・色の画像ファイルを作るフィクスチャ"""

    def _make(
        name: str,
        size: tuple[int, int] = (200, 100),
        color=(200, 30, 30),
        mode: str = "RGB",
        directory: Path | None = None,
        **save_kwargs,
    ) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        Image.new(mode, size, color).save(path, **save_kwargs)
        return path

    return _make


@pytest.fixture
def batch_dir(tmp_path: Path, make_image: Callable[..., Path]) -> Path:
    """有効なJPEG 2枚と、画像ではない .jpg 1枚を含むディレクトリ"""
    source = tmp_path / "input"
    make_image("a.jpg", (400, 200), directory=source)
    make_image("b.jpg", (300, 300), color=(10, 120, 200), directory=source)
    (source / "broken.jpg").write_bytes(b"this is not an image")
    return source
