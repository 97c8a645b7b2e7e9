"""
Download endpoint for processed files.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ..file_service import FileService, get_file_service, media_type_for

router = APIRouter()


@router.get("/{file_name}")
async def download_file(file_name: str, service: FileService = Depends(get_file_service)):
    path = service.resolve_download(file_name)
    return FileResponse(
        path,
        media_type=media_type_for(path),
        filename=path.name,
        headers={"Cache-Control": f"public, max-age={service.settings.download_max_age}"},
    )
