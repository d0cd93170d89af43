from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from placement_tracker.core.config import settings
from placement_tracker.dependencies.error_code import ErrorCode
from placement_tracker.utils.helpers import validate_object_id

security = HTTPBearer()


class CurrentOwner:
    """The authenticated candidate; every application operation is scoped to it."""

    def __init__(self, owner_id: str, claims: Optional[dict] = None):
        self.owner_id = owner_id
        self.claims = claims or {}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_jwt_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def _unauthorized(code: ErrorCode) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=code,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_owner(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentOwner:
    payload = decode_jwt_token(credentials.credentials)
    if payload is None:
        raise _unauthorized(ErrorCode.TOKEN_INVALID)

    owner_id = payload.get("sub") or payload.get("id")
    if not owner_id or not validate_object_id(str(owner_id)):
        raise _unauthorized(ErrorCode.INVALID_CREDENTIALS)

    return CurrentOwner(owner_id=str(owner_id), claims=payload)
