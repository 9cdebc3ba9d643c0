from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from ..storage import AssetStorage, get_storage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{token}")
def download_file(token: str, storage: AssetStorage = Depends(get_storage)):
    """Serve a stored file through a presigned link, no bearer token needed"""
    reference = storage.resolve_download_token(token)
    if reference is None:
        raise HTTPException(status_code=403, detail="Invalid or expired download link")

    path = storage.path_for(reference)
    if not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, filename=path.name)
