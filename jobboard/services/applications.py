"""Application lifecycle: submission, review, withdrawal.

Every operation takes the acting :class:`~jobboard.policies.Actor`
explicitly and checks the matching policy before touching anything.
"""
import logging
from typing import assert_never

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, policies
from ..errors import Conflict, NotFound, ValidationError
from ..policies import Actor
from ..storage import AssetStorage, UploadedFile, validate_cv_file
from . import job_offers as job_offer_service
from .files import commit_file_replacement

logger = logging.getLogger(__name__)

DUPLICATE_APPLICATION = "You have already applied for this job"
CV_DIRECTORY = "cvs"


def get_application(db: Session, application_id: int) -> models.Application:
    application = db.get(models.Application, application_id)
    if not application:
        raise NotFound("Application not found")
    return application


def find_existing_application(db: Session, user_id: int, job_offer_id: int) -> models.Application | None:
    return (
        db.query(models.Application)
        .filter(
            models.Application.user_id == user_id,
            models.Application.job_offer_id == job_offer_id,
        )
        .first()
    )


def list_applications(db: Session, actor: Actor, job_offer_id: int | None = None) -> list[models.Application]:
    policies.authorize(policies.can_view_any_applications(actor), "list applications", actor)
    query = db.query(models.Application)

    if job_offer_id is not None:
        job_offer = job_offer_service.get_job_offer(db, job_offer_id)
        policies.authorize(
            policies.can_list_job_offer_applications(actor, job_offer),
            "list job offer applications",
            actor,
        )
        query = query.filter(models.Application.job_offer_id == job_offer.id)
    else:
        match actor.role:
            case models.UserRole.ADMIN:
                pass
            case models.UserRole.RECRUITER:
                query = query.join(models.Application.job_offer).filter(
                    models.JobOffer.recruiter_id == actor.id
                )
            case models.UserRole.CANDIDATE:
                query = query.filter(models.Application.user_id == actor.id)
            case _:
                assert_never(actor.role)

    return query.order_by(models.Application.id).all()


def show_application(db: Session, actor: Actor, application_id: int) -> models.Application:
    application = get_application(db, application_id)
    policies.authorize(policies.can_view_application(actor, application), "view application", actor)
    return application


def submit_application(
    db: Session,
    storage: AssetStorage,
    actor: Actor,
    job_offer_id: int,
    cover_letter: str | None,
    cv: UploadedFile | None = None,
) -> models.Application:
    policies.authorize(policies.can_create_application(actor), "create application", actor)

    errors = {}
    if not cover_letter or not cover_letter.strip():
        errors["cover_letter"] = ["The cover letter field is required."]
    if db.get(models.JobOffer, job_offer_id) is None:
        errors["job_offer_id"] = ["The selected job offer id is invalid."]
    if cv is not None:
        cv_errors = validate_cv_file(cv, "cv")
        if cv_errors:
            errors["cv"] = cv_errors
    if errors:
        raise ValidationError(errors)

    if find_existing_application(db, actor.id, job_offer_id):
        raise Conflict(DUPLICATE_APPLICATION)

    # the file must exist before any row points at it
    cv_path = storage.put(cv.content, CV_DIRECTORY, cv.extension) if cv is not None else None

    application = models.Application(
        user_id=actor.id,
        job_offer_id=job_offer_id,
        cover_letter=cover_letter,
        status=models.ApplicationStatus.PENDING,
        cv_path=cv_path,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if cv_path:
            storage.discard(cv_path)
        # a concurrent submission got there first
        if find_existing_application(db, actor.id, job_offer_id):
            raise Conflict(DUPLICATE_APPLICATION)
        raise
    db.refresh(application)
    logger.info(f"User {actor.id} applied to job offer {job_offer_id} (application {application.id})")
    return application


def update_application(
    db: Session,
    storage: AssetStorage,
    actor: Actor,
    application: models.Application,
    cover_letter: str | None = None,
    status: str | None = None,
    cv: UploadedFile | None = None,
) -> models.Application:
    """Candidates edit their letter and CV, recruiters and admins move the
    status. Each side may only send its own fields."""
    policies.authorize(policies.can_update_application(actor, application), "update application", actor)
    new_path = None

    match actor.role:
        case models.UserRole.CANDIDATE:
            errors = {}
            if status is not None:
                errors["status"] = ["Candidates cannot change the application status."]
            if cover_letter is not None and not cover_letter.strip():
                errors["cover_letter"] = ["The cover letter field is required."]
            if cv is not None:
                cv_errors = validate_cv_file(cv, "cv")
                if cv_errors:
                    errors["cv"] = cv_errors
            if errors:
                raise ValidationError(errors)

            if cv is not None:
                restore = {"cv_path": application.cv_path, "cover_letter": application.cover_letter}
                new_path = storage.put(cv.content, CV_DIRECTORY, cv.extension)
                application.cv_path = new_path
            if cover_letter is not None:
                application.cover_letter = cover_letter

        case models.UserRole.RECRUITER | models.UserRole.ADMIN:
            errors = {}
            if cover_letter is not None:
                errors["cover_letter"] = ["Only the candidate can change the cover letter."]
            if cv is not None:
                errors["cv"] = ["Only the candidate can change the CV."]
            if status is None:
                errors["status"] = ["The status field is required."]
            else:
                try:
                    status = models.ApplicationStatus(status)
                except ValueError:
                    errors["status"] = ["The selected status is invalid."]
            if errors:
                raise ValidationError(errors)

            previous = application.status
            application.status = status
            logger.info(
                f"Application {application.id} moved from {previous.value} to {status.value} by user {actor.id}"
            )

        case _:
            assert_never(actor.role)

    if new_path:
        commit_file_replacement(db, storage, application, restore["cv_path"], new_path, restore)
    else:
        db.commit()
    db.refresh(application)
    return application


def delete_application(db: Session, storage: AssetStorage, actor: Actor, application: models.Application) -> None:
    policies.authorize(policies.can_delete_application(actor, application), "delete application", actor)
    if application.cv_path:
        storage.delete(application.cv_path)
    db.delete(application)
    db.commit()
    logger.info(f"Application {application.id} deleted by user {actor.id}")
