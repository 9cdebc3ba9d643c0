from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import (
    REFRESH,
    authenticate_user,
    credentials_exception,
    decode_token,
    get_current_user,
    get_token_payload,
    issue_tokens,
    load_active_user,
    revoke_session,
    revoke_token,
)
from ..database import get_db
from ..services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def register_user(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    user = user_service.register_user(db, user_in)
    return issue_tokens(user)


@router.post("/login", response_model=schemas.Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return issue_tokens(user)


@router.post("/logout", response_model=schemas.Message)
def logout(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    revoke_session(db, payload)
    return {"message": "Successfully logged out"}


@router.post("/refresh", response_model=schemas.Token)
def refresh_tokens(request: schemas.RefreshRequest, db: Session = Depends(get_db)):
    payload = decode_token(db, request.refresh_token, REFRESH)
    if payload is None:
        raise credentials_exception()
    user = load_active_user(db, payload)
    # refresh tokens are single use
    revoke_token(db, payload)
    return issue_tokens(user)


@router.get("/user", response_model=schemas.UserDetail)
async def read_users_me(current_user: models.User = Depends(get_current_user)):
    return current_user
