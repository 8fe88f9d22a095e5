from jose import jwt
from datetime import timedelta
from typing import Optional

from portal.core.clock import utcnow
from portal.core.config import Settings

settings = Settings()

ALGORITHM = "HS256"

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_minutes))
    to_encode = data.copy()
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError when the token is invalid or expired."""
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
