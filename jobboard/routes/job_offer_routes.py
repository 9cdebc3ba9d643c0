from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import get_current_actor
from ..database import get_db
from ..policies import Actor
from ..services import job_offers as job_offer_service
from ..storage import AssetStorage, get_storage

router = APIRouter(prefix="/job-offers", tags=["job-offers"])


@router.get("", response_model=List[schemas.JobOfferOut])
def list_job_offers(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return job_offer_service.list_job_offers(db, actor)


@router.post("", response_model=schemas.JobOfferOut, status_code=status.HTTP_201_CREATED)
def create_job_offer(
    job_offer_in: schemas.JobOfferCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return job_offer_service.create_job_offer(db, actor, job_offer_in)


@router.get("/{job_offer_id}", response_model=schemas.JobOfferDetail)
def get_job_offer(
    job_offer_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job_offer = job_offer_service.show_job_offer(db, actor, job_offer_id)
    detail = schemas.JobOfferDetail.model_validate(job_offer)
    detail.applications_count = job_offer_service.count_applications(db, job_offer)
    return detail


@router.put("/{job_offer_id}", response_model=schemas.JobOfferOut)
def update_job_offer(
    job_offer_id: int,
    job_offer_in: schemas.JobOfferUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job_offer = job_offer_service.get_job_offer(db, job_offer_id)
    return job_offer_service.update_job_offer(db, actor, job_offer, job_offer_in)


@router.delete("/{job_offer_id}", response_model=schemas.Message)
def delete_job_offer(
    job_offer_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    job_offer = job_offer_service.get_job_offer(db, job_offer_id)
    job_offer_service.delete_job_offer(db, storage, actor, job_offer)
    return {"message": "Job offer deleted successfully"}
