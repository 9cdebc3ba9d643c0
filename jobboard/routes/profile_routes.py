from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import get_current_actor
from ..database import get_db
from ..policies import Actor
from ..services import profiles as profile_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=schemas.ProfileEnvelope)
def show_profile(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return {"profile": profile_service.get_profile(db, actor)}


@router.post("", response_model=schemas.ProfileOut)
def update_profile(
    profile_in: schemas.ProfileIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return profile_service.upsert_profile(db, actor, profile_in)
