import logging
from typing import assert_never

from sqlalchemy.orm import Session

from .. import models, policies, schemas
from ..errors import NotFound
from ..policies import Actor
from ..storage import AssetStorage

logger = logging.getLogger(__name__)


def get_job_offer(db: Session, job_offer_id: int) -> models.JobOffer:
    job_offer = db.get(models.JobOffer, job_offer_id)
    if not job_offer:
        raise NotFound("Job offer not found")
    return job_offer


def list_job_offers(db: Session, actor: Actor) -> list[models.JobOffer]:
    """Recruiters see their own offers, admins everything, candidates only
    published ones."""
    policies.authorize(policies.can_view_any_job_offers(actor), "list job offers", actor)
    query = db.query(models.JobOffer)
    match actor.role:
        case models.UserRole.RECRUITER:
            query = query.filter(models.JobOffer.recruiter_id == actor.id)
        case models.UserRole.ADMIN:
            pass
        case models.UserRole.CANDIDATE:
            query = query.filter(models.JobOffer.status == models.JobOfferStatus.PUBLISHED)
        case _:
            assert_never(actor.role)
    return query.order_by(models.JobOffer.posted_at.desc(), models.JobOffer.id.desc()).all()


def show_job_offer(db: Session, actor: Actor, job_offer_id: int) -> models.JobOffer:
    job_offer = get_job_offer(db, job_offer_id)
    policies.authorize(policies.can_view_job_offer(actor, job_offer), "view job offer", actor)
    return job_offer


def count_applications(db: Session, job_offer: models.JobOffer) -> int:
    return (
        db.query(models.Application)
        .filter(models.Application.job_offer_id == job_offer.id)
        .count()
    )


def create_job_offer(db: Session, actor: Actor, job_offer_in: schemas.JobOfferCreate) -> models.JobOffer:
    policies.authorize(policies.can_create_job_offer(actor), "create job offer", actor)
    job_offer = models.JobOffer(**job_offer_in.model_dump(), recruiter_id=actor.id)
    db.add(job_offer)
    db.commit()
    db.refresh(job_offer)
    logger.info(f"Job offer {job_offer.id} created by user {actor.id}")
    return job_offer


def update_job_offer(
    db: Session,
    actor: Actor,
    job_offer: models.JobOffer,
    job_offer_in: schemas.JobOfferUpdate,
) -> models.JobOffer:
    policies.authorize(policies.can_update_job_offer(actor, job_offer), "update job offer", actor)
    for field, value in job_offer_in.model_dump(exclude_unset=True).items():
        setattr(job_offer, field, value)
    db.commit()
    db.refresh(job_offer)
    logger.info(f"Job offer {job_offer.id} updated by user {actor.id}")
    return job_offer


def delete_job_offer(db: Session, storage: AssetStorage, actor: Actor, job_offer: models.JobOffer) -> None:
    policies.authorize(policies.can_delete_job_offer(actor, job_offer), "delete job offer", actor)
    # applications go with the offer, so their CV files go first
    for application in job_offer.applications:
        if application.cv_path:
            storage.delete(application.cv_path)
    db.delete(job_offer)
    db.commit()
    logger.info(f"Job offer {job_offer.id} deleted by user {actor.id}")
