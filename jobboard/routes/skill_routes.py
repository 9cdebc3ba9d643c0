from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..database import get_db
from ..services import skills as skill_service

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=List[schemas.SkillOut])
def list_skills(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return skill_service.list_skills(db)


@router.post("", response_model=schemas.SkillOut, status_code=status.HTTP_201_CREATED)
def create_skill(
    skill_in: schemas.SkillCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return skill_service.create_skill(db, skill_in)


@router.get("/{skill_id}", response_model=schemas.SkillOut)
def get_skill(
    skill_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return skill_service.get_skill(db, skill_id)


@router.patch("/{skill_id}", response_model=schemas.SkillOut)
def update_skill(
    skill_id: int,
    skill_in: schemas.SkillUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    skill = skill_service.get_skill(db, skill_id)
    return skill_service.update_skill(db, skill, skill_in)


@router.delete("/{skill_id}", response_model=schemas.Message)
def delete_skill(
    skill_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    skill = skill_service.get_skill(db, skill_id)
    skill_service.delete_skill(db, skill)
    return {"message": "Skill deleted successfully"}
