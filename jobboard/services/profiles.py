from sqlalchemy.orm import Session

from .. import models, schemas
from ..policies import Actor


def get_profile(db: Session, actor: Actor) -> models.Profile | None:
    return db.query(models.Profile).filter(models.Profile.user_id == actor.id).first()


def upsert_profile(db: Session, actor: Actor, profile_in: schemas.ProfileIn) -> models.Profile:
    """Create the actor's profile on first write, update it afterwards."""
    profile = get_profile(db, actor)
    if profile is None:
        profile = models.Profile(user_id=actor.id, **profile_in.model_dump())
        db.add(profile)
    else:
        for field, value in profile_in.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile
