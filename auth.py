import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from config import get_settings
from database import Database, get_db

logger = logging.getLogger(__name__)

# auto_error is off so a missing header gets the same body as a bad token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/jwt", auto_error=False)


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized access",
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden access")


# Token service

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.access_token_secret, algorithm=settings.access_token_algorithm)


def decode_access_token(token: str) -> dict:
    """Return the token's claims, or raise 401 for any bad or expired token."""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.access_token_secret,
            algorithms=[settings.access_token_algorithm],
            options={"verify_aud": False, "verify_sub": False},
        )
    except JWTError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise unauthorized()


# Request pipeline stages

async def verify_jwt(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """Authentication stage: decoded claims of the request's bearer token."""
    if not token:
        raise unauthorized()
    return decode_access_token(token)


def verify_admin(decoded: dict = Depends(verify_jwt), db: Database = Depends(get_db)) -> dict:
    """Authorization stage. Runs after verify_jwt and lets only admins through."""
    email = decoded.get("email")
    if not email:
        raise forbidden()
    user = db.users.find_one({"email": email})
    if not user or user.get("role") != "admin":
        raise forbidden()
    return decoded
