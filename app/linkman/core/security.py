from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import HTTPBearer
from jose import jwt
from pydantic import BaseModel, Field

from app.linkman.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_TOKEN_LIFETIME = timedelta(minutes=60)


class TokenData(BaseModel):
    sub: str
    roles: list[str] = Field(default_factory=list)
    groups: list[str] = Field(default_factory=list)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_user_access_token(
    user_id: str,
    *,
    roles: list[str] | None = None,
    groups: list[str] | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    return create_access_token(
        {
            "sub": user_id,
            "roles": list(roles or []),
            "groups": list(groups or []),
        },
        expires_delta=expires_delta,
    )
