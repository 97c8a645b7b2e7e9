"""
ImageGlider API application factory
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from .config import ApiSettings, get_settings
from .models import ApiError, ApiResponse
from .routers import color, compress, convert, crop, download, info, metadata, resize, watermark


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ApiResponse.fail(status_code, message).model_dump())


def create_app(settings: Optional[ApiSettings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="ImageGlider API",
        description="画像の形式変換・リサイズ・切り抜き・透かし・色調整・メタデータ除去",
        version=__version__,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(400, f"リクエストが不正です: {exc.errors()}")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path}: 予期しないエラー")
        return _error_response(500, "サーバー内部でエラーが発生しました")

    app.include_router(convert.router, prefix="/api/convert", tags=["Convert"])
    app.include_router(resize.router, prefix="/api/resize", tags=["Resize"])
    app.include_router(crop.router, prefix="/api/crop", tags=["Crop"])
    app.include_router(compress.router, prefix="/api/compress", tags=["Compress"])
    app.include_router(watermark.router, prefix="/api/watermark", tags=["Watermark"])
    app.include_router(color.router, prefix="/api/color", tags=["Color"])
    app.include_router(metadata.router, prefix="/api/metadata", tags=["Metadata"])
    app.include_router(info.router, prefix="/api/info", tags=["Info"])
    app.include_router(download.router, prefix="/api/download", tags=["Download"])

    @app.get("/api/health")
    async def health():
        return ApiResponse.ok(data={"version": __version__}, message="ok")

    return app
