"""
Image information endpoint.
"""
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from PIL import UnidentifiedImageError

from ...processors import InfoExtractor
from ..file_service import FileService, get_file_service
from ..models import ApiError, ApiResponse

router = APIRouter()


@router.post("", response_model=ApiResponse)
async def get_image_info(
    file: UploadFile = File(...),
    service: FileService = Depends(get_file_service),
):
    source = await service.save_upload(file)
    try:
        info = await run_in_threadpool(InfoExtractor().extract, source)
    except (UnidentifiedImageError, OSError) as e:
        raise ApiError(400, f"画像情報を取得できません: {e}")
    finally:
        service.delete(source)

    data = info.to_dict()
    # 保存用の一時パスではなくアップロード時の名前を返す
    data["file_path"] = file.filename
    data["file_name"] = file.filename
    return ApiResponse.ok(data=data)
