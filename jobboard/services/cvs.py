import logging
from datetime import timedelta
from pathlib import Path

from sqlalchemy.orm import Session

from .. import models, policies
from ..config import settings
from ..errors import NotFound, ValidationError
from ..policies import Actor
from ..storage import AssetStorage, UploadedFile, validate_cv_file
from .files import commit_file_replacement

logger = logging.getLogger(__name__)


def has_applied_to_recruiter(db: Session, user_id: int, recruiter_id: int) -> bool:
    """Whether ``user_id`` has an application to any offer owned by
    ``recruiter_id``."""
    query = (
        db.query(models.Application.id)
        .join(models.Application.job_offer)
        .filter(
            models.Application.user_id == user_id,
            models.JobOffer.recruiter_id == recruiter_id,
        )
    )
    return db.query(query.exists()).scalar()


def get_cv(db: Session, cv_id: int) -> models.CV:
    cv = db.get(models.CV, cv_id)
    if not cv:
        raise NotFound("CV not found")
    return cv


def authorize_view(db: Session, actor: Actor, cv: models.CV) -> None:
    allowed = policies.can_view_cv(
        actor, cv, lambda: has_applied_to_recruiter(db, cv.user_id, actor.id)
    )
    policies.authorize(allowed, "view cv", actor)


def list_cvs(db: Session, actor: Actor) -> list[models.CV]:
    return (
        db.query(models.CV)
        .filter(models.CV.user_id == actor.id)
        .order_by(models.CV.id)
        .all()
    )


def _directory_for(user_id: int) -> str:
    return f"cvs/{user_id}"


def create_cv(db: Session, storage: AssetStorage, actor: Actor, title: str | None, file: UploadedFile | None) -> models.CV:
    errors = {}
    if not title or not title.strip():
        errors["title"] = ["The title field is required."]
    elif len(title) > 255:
        errors["title"] = ["The title must not be greater than 255 characters."]
    if file is None:
        errors["file"] = ["The file field is required."]
    else:
        file_errors = validate_cv_file(file, "file")
        if file_errors:
            errors["file"] = file_errors
    if errors:
        raise ValidationError(errors)

    path = storage.put(file.content, _directory_for(actor.id), file.extension)
    cv = models.CV(user_id=actor.id, title=title, file_path=path, file_type=file.extension)
    db.add(cv)
    db.commit()
    db.refresh(cv)
    logger.info(f"CV {cv.id} uploaded by user {actor.id}")
    return cv


def show_cv(db: Session, storage: AssetStorage, actor: Actor, cv: models.CV) -> tuple[models.CV, str | None]:
    """Return the CV together with a short-lived download link."""
    authorize_view(db, actor, cv)
    download_url = None
    if cv.file_path:
        download_url = storage.presigned_download_url(
            cv.file_path, timedelta(seconds=settings.download_url_ttl_seconds)
        )
    return cv, download_url


def open_cv_file(db: Session, storage: AssetStorage, actor: Actor, cv: models.CV) -> Path:
    authorize_view(db, actor, cv)
    path = storage.path_for(cv.file_path)
    if not path.is_file():
        raise NotFound("CV file not found")
    return path


def update_cv(
    db: Session,
    storage: AssetStorage,
    actor: Actor,
    cv: models.CV,
    title: str | None = None,
    file: UploadedFile | None = None,
) -> models.CV:
    policies.authorize(policies.can_update_cv(actor, cv), "update cv", actor)

    errors = {}
    if title is not None:
        if not title.strip():
            errors["title"] = ["The title field is required."]
        elif len(title) > 255:
            errors["title"] = ["The title must not be greater than 255 characters."]
    if file is not None:
        file_errors = validate_cv_file(file, "file")
        if file_errors:
            errors["file"] = file_errors
    if errors:
        raise ValidationError(errors)

    if file is None:
        if title is not None:
            cv.title = title
        db.commit()
    else:
        restore = {"file_path": cv.file_path, "file_type": cv.file_type, "title": cv.title}
        new_path = storage.put(file.content, _directory_for(cv.user_id), file.extension)
        cv.file_path = new_path
        cv.file_type = file.extension
        if title is not None:
            cv.title = title
        commit_file_replacement(db, storage, cv, restore["file_path"], new_path, restore)
    db.refresh(cv)
    return cv


def delete_cv(db: Session, storage: AssetStorage, actor: Actor, cv: models.CV) -> None:
    policies.authorize(policies.can_delete_cv(actor, cv), "delete cv", actor)
    storage.delete(cv.file_path)
    db.delete(cv)
    db.commit()
    logger.info(f"CV {cv.id} deleted by user {actor.id}")
