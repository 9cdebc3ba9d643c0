from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import get_current_actor
from ..database import get_db
from ..policies import Actor
from ..services import users as user_service
from ..storage import AssetStorage, get_storage

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[schemas.UserOut])
def list_users(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return user_service.list_users(db, actor)


@router.get("/{user_id}", response_model=schemas.UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return user_service.show_user(db, actor, user_id)


@router.patch("/{user_id}", response_model=schemas.UserDetail)
def update_user(
    user_id: int,
    user_in: schemas.UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = user_service.get_user(db, user_id)
    return user_service.update_user(db, actor, user, user_in)


@router.delete("/{user_id}", response_model=schemas.Message)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    storage: AssetStorage = Depends(get_storage),
):
    user = user_service.get_user(db, user_id)
    user_service.delete_user(db, storage, actor, user)
    return {"message": "User deleted successfully"}
