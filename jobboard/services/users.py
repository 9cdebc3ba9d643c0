import logging

from sqlalchemy.orm import Session

from .. import models, policies, schemas
from ..auth import get_user_by_email, hash_password
from ..errors import NotFound, ValidationError
from ..policies import Actor
from ..storage import AssetStorage
from .skills import resolve_skills

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


def register_user(db: Session, user_in: schemas.UserCreate) -> models.User:
    if get_user_by_email(db, user_in.email):
        raise ValidationError.single("email", EMAIL_TAKEN)

    skills = resolve_skills(db, user_in.skills) if user_in.skills else []
    user = models.User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=hash_password(user_in.password),
        role=user_in.role,
        is_active=True,
        skills=skills,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} as {user.role.value}")
    return user


def get_user(db: Session, user_id: int) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def list_users(db: Session, actor: Actor) -> list[models.User]:
    policies.authorize(policies.can_view_any_users(actor), "list users", actor)
    return db.query(models.User).order_by(models.User.id).all()


def show_user(db: Session, actor: Actor, user_id: int) -> models.User:
    user = get_user(db, user_id)
    policies.authorize(policies.can_view_user(actor, user), "view user", actor)
    return user


def update_user(db: Session, actor: Actor, user: models.User, user_in: schemas.UserUpdate) -> models.User:
    policies.authorize(policies.can_update_user(actor, user), "update user", actor)
    changes = user_in.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != user.email:
        other = get_user_by_email(db, changes["email"])
        if other and other.id != user.id:
            raise ValidationError.single("email", EMAIL_TAKEN)
        user.email = changes["email"]
    if changes.get("name"):
        user.name = changes["name"]
    if "skills" in changes:
        user.skills = resolve_skills(db, changes["skills"] or [])

    db.commit()
    db.refresh(user)
    return user


def _stored_files(user: models.User) -> list[str]:
    paths = [cv.file_path for cv in user.cvs]
    paths += [application.cv_path for application in user.applications]
    for job_offer in user.job_offers:
        paths += [application.cv_path for application in job_offer.applications]
    return [path for path in paths if path]


def delete_user(db: Session, storage: AssetStorage, actor: Actor, user: models.User) -> None:
    policies.authorize(policies.can_delete_user(actor, user), "delete user", actor)
    for path in dict.fromkeys(_stored_files(user)):
        storage.delete(path)
    db.delete(user)
    db.commit()
    logger.info(f"User {user.id} deleted by user {actor.id}")
