from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    status,
    UploadFile,
    File,
    Form,
)
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import get_current_actor
from ..database import get_db
from ..policies import Actor
from ..services import applications as application_service
from ..storage import AssetStorage, UploadedFile, get_storage

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=List[schemas.ApplicationDetail])
def list_applications(
    job_offer_id: Optional[int] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return application_service.list_applications(db, actor, job_offer_id)


@router.post("", response_model=schemas.ApplicationOut, status_code=status.HTTP_201_CREATED)
def create_application(
    job_offer_id: int = Form(...),
    cover_letter: Optional[str] = Form(None),
    cv: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    return application_service.submit_application(
        db,
        storage,
        actor,
        job_offer_id=job_offer_id,
        cover_letter=cover_letter,
        cv=UploadedFile.from_upload(cv),
    )


@router.get("/{application_id}", response_model=schemas.ApplicationDetail)
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return application_service.show_application(db, actor, application_id)


@router.patch("/{application_id}", response_model=schemas.ApplicationOut)
def update_application(
    application_id: int,
    cover_letter: Optional[str] = Form(None),
    new_status: Optional[str] = Form(None, alias="status"),
    cv: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    application = application_service.get_application(db, application_id)
    return application_service.update_application(
        db,
        storage,
        actor,
        application,
        cover_letter=cover_letter,
        status=new_status,
        cv=UploadedFile.from_upload(cv),
    )


@router.delete("/{application_id}", response_model=schemas.Message)
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    application = application_service.get_application(db, application_id)
    application_service.delete_application(db, storage, actor, application)
    return {"message": "Application deleted successfully"}
