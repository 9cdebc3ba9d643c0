from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from datetime import datetime

from .models import ApplicationStatus, ContractType, JobOfferStatus, UserRole


class UserSummary(BaseModel):
    id: int
    name: str
    email: EmailStr

    class Config:
        from_attributes = True


# Skill Schemas
class SkillBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None

class SkillCreate(SkillBase):
    pass

class SkillUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None

class SkillOut(SkillBase):
    id: int

    class Config:
        from_attributes = True


# Profile Schemas
class ProfileIn(BaseModel):
    phone_number: Optional[str] = Field(default=None, max_length=20)
    image: Optional[str] = None

class ProfileOut(ProfileIn):
    id: int
    user_id: int

    class Config:
        from_attributes = True

class ProfileEnvelope(BaseModel):
    profile: Optional[ProfileOut] = None


# CV Schemas
class CVOut(BaseModel):
    id: int
    user_id: int
    title: str
    file_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CVDetail(CVOut):
    download_url: Optional[str] = None


# User Schemas
class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(min_length=8)
    password_confirmation: str
    role: UserRole = UserRole.CANDIDATE
    skills: Optional[List[int]] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("The password confirmation does not match.")
        return self

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    skills: Optional[List[int]] = None

class UserOut(UserBase):
    id: int
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserDetail(UserOut):
    skills: List[SkillOut] = []
    profile: Optional[ProfileOut] = None
    cvs: List[CVOut] = []


# Token Schemas
class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
    user: UserOut

class RefreshRequest(BaseModel):
    refresh_token: str


# Job Offer Schemas
class JobOfferBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=255)
    contract_type: ContractType
    salary: float = Field(ge=0)
    status: JobOfferStatus = JobOfferStatus.DRAFT

class JobOfferCreate(JobOfferBase):
    pass

class JobOfferUpdate(JobOfferBase):
    # left out means unchanged
    status: Optional[JobOfferStatus] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("The status field must not be null.")
        return value

class JobOfferOut(JobOfferBase):
    id: int
    recruiter_id: int
    posted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class JobOfferDetail(JobOfferOut):
    recruiter: Optional[UserSummary] = None
    applications_count: int = 0


# Application Schemas
class JobOfferSummary(BaseModel):
    id: int
    title: str
    recruiter_id: int

    class Config:
        from_attributes = True

class ApplicationOut(BaseModel):
    id: int
    user_id: int
    job_offer_id: int
    cover_letter: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    has_cv: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ApplicationDetail(ApplicationOut):
    user: Optional[UserSummary] = None
    job_offer: Optional[JobOfferSummary] = None


class Message(BaseModel):
    message: str
