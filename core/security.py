# core/security.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from starlette import status

from core.config import settings

ALGORITHM = "HS256"

# Tokens are issued by the external auth service; this path is informational
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth")


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    is_unlimited_tier: bool = False


def create_access_token(
    user_id: str,
    *,
    unlimited: bool = False,
    expires_minutes: Optional[int] = None,
) -> str:
    """Sign a token in the format the auth service issues (used by tooling and tests)."""
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": user_id,
        "unlimited": unlimited,
        "iat": int(now.timestamp()),
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """
    Resolves the bearer token into the user id and entitlement flag.
    Credentials are never checked here, only the signature of the
    already issued token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    return CurrentUser(
        user_id=str(user_id),
        is_unlimited_tier=bool(payload.get("unlimited", False)),
    )
