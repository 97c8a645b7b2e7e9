from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from image_glider.api.app import create_app
from image_glider.api.config import ApiSettings


def _png_bytes(size: tuple[int, int] = (200, 100), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def settings(tmp_path: Path) -> ApiSettings:
    return ApiSettings(work_dir=tmp_path / "wwwroot")


@pytest.fixture
def client(settings: ApiSettings) -> TestClient:
    return TestClient(create_app(settings))


def _download(client: TestClient, name: str) -> Image.Image:
    response = client.get(f"/api/download/{name}")
    assert response.status_code == 200
    return Image.open(io.BytesIO(response.content))


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["successful"] is True


def test_convert_then_download(client: TestClient, settings: ApiSettings) -> None:
    response = client.post(
        "/api/convert",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"file_ext": "jpg", "quality": "80"},
    )

    body = response.json()
    assert response.status_code == 200, body
    assert body["successful"] is True
    assert body["data"].endswith(".jpg")
    # アップロードされた元ファイルは処理後に消える
    assert list(settings.source_dir.iterdir()) == []

    download = client.get(f"/api/download/{body['data']}")
    assert download.headers["cache-control"] == "public, max-age=3600"
    assert download.headers["content-type"] == "image/jpeg"
    assert Image.open(io.BytesIO(download.content)).format == "JPEG"


def test_convert_rejects_unknown_extension(client: TestClient) -> None:
    response = client.post(
        "/api/convert",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"file_ext": "exe"},
    )
    assert response.status_code == 400
    assert response.json()["successful"] is False


def test_upload_with_disallowed_extension_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/api/resize",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"width": "10"},
    )
    assert response.status_code == 400


def test_resize_keep_aspect(client: TestClient) -> None:
    response = client.post(
        "/api/resize",
        files={"file": ("photo.png", _png_bytes((300, 200)), "image/png")},
        data={"width": "100"},
    )
    assert response.status_code == 200, response.json()
    assert _download(client, response.json()["data"]).size == (100, 66)


def test_thumbnail(client: TestClient) -> None:
    response = client.post(
        "/api/resize/thumbnail",
        files={"file": ("photo.png", _png_bytes((400, 200)), "image/png")},
        data={"max_size": "50"},
    )
    assert _download(client, response.json()["data"]).size == (50, 25)


def test_crop_out_of_bounds_is_400_and_leaves_no_output(client: TestClient, settings: ApiSettings) -> None:
    response = client.post(
        "/api/crop",
        files={"file": ("photo.png", _png_bytes((100, 100)), "image/png")},
        data={"x": "50", "y": "50", "width": "100", "height": "100"},
    )
    assert response.status_code == 400
    assert response.json()["successful"] is False
    assert not any(settings.output_dir.iterdir())


def test_crop_center(client: TestClient) -> None:
    response = client.post(
        "/api/crop/center",
        files={"file": ("photo.png", _png_bytes((100, 100)), "image/png")},
        data={"width": "40", "height": "20"},
    )
    assert _download(client, response.json()["data"]).size == (40, 20)


def test_text_watermark(client: TestClient) -> None:
    response = client.post(
        "/api/watermark/text",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"text": "sample", "position": "top-left", "opacity": "80"},
    )
    assert response.status_code == 200, response.json()


def test_text_watermark_rejects_bad_position(client: TestClient) -> None:
    response = client.post(
        "/api/watermark/text",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"text": "sample", "position": "nowhere"},
    )
    assert response.status_code == 400


def test_image_watermark_cleans_up_uploads(client: TestClient, settings: ApiSettings) -> None:
    response = client.post(
        "/api/watermark/image",
        files={
            "file": ("photo.png", _png_bytes(), "image/png"),
            "watermark": ("mark.png", _png_bytes((20, 20), (0, 0, 255)), "image/png"),
        },
        data={"scale": "0.5"},
    )
    assert response.status_code == 200, response.json()
    assert list(settings.source_dir.iterdir()) == []


def test_color_adjust_and_metadata_strip(client: TestClient) -> None:
    adjusted = client.post(
        "/api/color/adjust",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"brightness": "20", "gamma": "9"},
    )
    stripped = client.post(
        "/api/metadata/strip",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"strip_all": "false", "strip_icc": "true"},
    )
    assert adjusted.status_code == 200
    assert stripped.status_code == 200


def test_compress(client: TestClient) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"compression_level": "30"},
    )
    assert response.status_code == 200
    assert response.json()["data"].endswith(".png")


def test_info_reports_upload_name(client: TestClient) -> None:
    response = client.post("/api/info", files={"file": ("photo.png", _png_bytes((64, 48)), "image/png")})

    data = response.json()["data"]
    assert data["file_name"] == "photo.png"
    assert (data["width"], data["height"]) == (64, 48)
    assert data["format"] == "PNG"


def test_info_rejects_broken_image(client: TestClient) -> None:
    response = client.post("/api/info", files={"file": ("photo.png", b"not an image", "image/png")})
    assert response.status_code == 400


def test_download_missing_and_traversal(client: TestClient) -> None:
    assert client.get("/api/download/nothing.png").status_code == 404
    assert client.get("/api/download/a%3Cb.png").status_code == 400


def test_missing_form_field_is_400(client: TestClient) -> None:
    response = client.post("/api/convert", files={"file": ("photo.png", _png_bytes(), "image/png")})
    assert response.status_code == 400
