import logging
import uuid
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .policies import Actor
from . import models

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

ACCESS = "access"
REFRESH = "refresh"


def credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def hash_password(password: str) -> str:
    return pwd_context.hash(password[:72])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password[:72], hashed_password)


def _secret_for(token_type: str) -> str:
    if token_type == REFRESH:
        return settings.jwt_refresh_secret_key
    return settings.jwt_secret_key


def _create_token(user: models.User, token_type: str, expires: timedelta, sid: str) -> str:
    to_encode = {
        "sub": str(user.id),
        "sid": sid,
        "role": models.UserRole(user.role).value,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "exp": datetime.now(timezone.utc) + expires,
    }
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.jwt_algorithm)


def create_access_token(user: models.User, sid: str, expires_minutes: int | None = None) -> str:
    minutes = expires_minutes or settings.access_token_expire_minutes
    return _create_token(user, ACCESS, timedelta(minutes=minutes), sid)


def create_refresh_token(user: models.User, sid: str) -> str:
    return _create_token(user, REFRESH, timedelta(days=settings.refresh_token_expire_days), sid)


def issue_tokens(user: models.User) -> dict:
    # both tokens of a pair share a session id so logout can end the pair
    sid = uuid.uuid4().hex
    return {
        "access_token": create_access_token(user, sid),
        "refresh_token": create_refresh_token(user, sid),
        "token_type": "bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
        "user": user,
    }


def is_token_revoked(db: Session, jti: str) -> bool:
    return db.get(models.RevokedToken, jti) is not None


def _revoke(db: Session, jti: str, expires_at: datetime) -> None:
    if is_token_revoked(db, jti):
        return
    db.add(models.RevokedToken(jti=jti, expires_at=expires_at))
    db.commit()


def revoke_token(db: Session, payload: dict) -> None:
    _revoke(db, payload["jti"], datetime.fromtimestamp(payload["exp"], tz=timezone.utc))


def revoke_session(db: Session, payload: dict) -> None:
    """Revoke the token and every other token issued in the same pair."""
    revoke_token(db, payload)
    # a session lives at most as long as its refresh token
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days)
    _revoke(db, payload["sid"], expires_at)


def decode_token(db: Session, token: str, token_type: str) -> dict | None:
    """Return the payload of a valid, unrevoked token of the given type."""
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    if payload.get("type") != token_type or not payload.get("sub"):
        return None
    if not payload.get("jti") or not payload.get("sid"):
        return None
    if is_token_revoked(db, payload["jti"]) or is_token_revoked(db, payload["sid"]):
        return None
    return payload


def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> models.User | None:
    user = get_user_by_email(db, email=email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def load_active_user(db: Session, payload: dict) -> models.User:
    user = db.get(models.User, int(payload["sub"]))
    if user is None or not user.is_active:
        raise credentials_exception()
    return user


async def get_token_payload(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> dict:
    payload = decode_token(db, token, ACCESS)
    if payload is None:
        raise credentials_exception()
    return payload


async def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> models.User:
    return load_active_user(db, payload)


async def get_current_actor(
    current_user: models.User = Depends(get_current_user),
) -> Actor:
    return Actor.from_user(current_user)
