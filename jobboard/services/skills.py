from sqlalchemy.orm import Session

from .. import models, schemas
from ..errors import NotFound, ValidationError


def list_skills(db: Session) -> list[models.Skill]:
    return db.query(models.Skill).order_by(models.Skill.name).all()


def get_skill(db: Session, skill_id: int) -> models.Skill:
    skill = db.get(models.Skill, skill_id)
    if not skill:
        raise NotFound("Skill not found")
    return skill


def _ensure_unique_name(db: Session, name: str, skill_id: int | None = None) -> None:
    query = db.query(models.Skill).filter(models.Skill.name == name)
    if skill_id is not None:
        query = query.filter(models.Skill.id != skill_id)
    if query.first():
        raise ValidationError.single("name", "The name has already been taken.")


def create_skill(db: Session, skill_in: schemas.SkillCreate) -> models.Skill:
    _ensure_unique_name(db, skill_in.name)
    skill = models.Skill(**skill_in.model_dump())
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return skill


def update_skill(db: Session, skill: models.Skill, skill_in: schemas.SkillUpdate) -> models.Skill:
    changes = skill_in.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        _ensure_unique_name(db, changes["name"], skill.id)
    elif "name" in changes:
        raise ValidationError.single("name", "The name field is required.")
    for field, value in changes.items():
        setattr(skill, field, value)
    db.commit()
    db.refresh(skill)
    return skill


def delete_skill(db: Session, skill: models.Skill) -> None:
    db.delete(skill)
    db.commit()


def resolve_skills(db: Session, skill_ids: list[int], field: str = "skills") -> list[models.Skill]:
    """Load skills by id, rejecting ids that do not exist."""
    unique_ids = list(dict.fromkeys(skill_ids))
    skills = db.query(models.Skill).filter(models.Skill.id.in_(unique_ids)).all()
    found = {skill.id for skill in skills}
    missing = [skill_id for skill_id in unique_ids if skill_id not in found]
    if missing:
        raise ValidationError(
            {f"{field}.{skill_id}": ["The selected skill is invalid."] for skill_id in missing}
        )
    return skills
