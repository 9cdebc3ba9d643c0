from typing import List, Optional

from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import get_current_actor
from ..database import get_db
from ..policies import Actor
from ..services import cvs as cv_service
from ..storage import AssetStorage, UploadedFile, get_storage

router = APIRouter(prefix="/cvs", tags=["cvs"])

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@router.get("", response_model=List[schemas.CVOut])
def list_my_cvs(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return cv_service.list_cvs(db, actor)


@router.post("", response_model=schemas.CVOut, status_code=status.HTTP_201_CREATED)
def upload_cv(
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    return cv_service.create_cv(db, storage, actor, title, UploadedFile.from_upload(file))


@router.get("/{cv_id}", response_model=schemas.CVDetail)
def get_cv(
    cv_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    cv, download_url = cv_service.show_cv(db, storage, actor, cv_service.get_cv(db, cv_id))
    detail = schemas.CVDetail.model_validate(cv)
    detail.download_url = download_url
    return detail


@router.get("/{cv_id}/download")
def download_cv(
    cv_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    """Download the CV file - owner, admins and recruiters the owner applied to"""
    cv = cv_service.get_cv(db, cv_id)
    path = cv_service.open_cv_file(db, storage, actor, cv)
    return FileResponse(
        path,
        media_type=MEDIA_TYPES.get(cv.file_type, "application/octet-stream"),
        filename=f"{cv.title}.{cv.file_type}",
    )


@router.patch("/{cv_id}", response_model=schemas.CVOut)
def update_cv(
    cv_id: int,
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    cv = cv_service.get_cv(db, cv_id)
    return cv_service.update_cv(db, storage, actor, cv, title=title, file=UploadedFile.from_upload(file))


@router.delete("/{cv_id}", response_model=schemas.Message)
def delete_cv(
    cv_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    cv = cv_service.get_cv(db, cv_id)
    cv_service.delete_cv(db, storage, actor, cv)
    return {"message": "CV deleted successfully"}
