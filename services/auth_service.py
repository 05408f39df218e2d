# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt

from services.config_service import get_session_secret

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 480


class AuthService:
    """Session authentication: the login service issues the JWT, this layer only reads it."""

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a session JWT. Used by the login service and the test suite."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, get_session_secret(), algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> dict:
        """Verify a session JWT and return its payload."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, get_session_secret(), algorithms=[ALGORITHM])
        except JWTError:
            raise credentials_exception
        if payload.get("sub") is None:
            raise credentials_exception
        return payload

    @staticmethod
    def get_user_id_from_token(token: str) -> uuid.UUID:
        """Resolve the caller identity carried in the ``sub`` claim."""
        payload = AuthService.verify_token(token)
        try:
            return uuid.UUID(str(payload["sub"]))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: malformed subject claim",
                headers={"WWW-Authenticate": "Bearer"},
            )
