# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import uuid

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer

from services.auth_service import AuthService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_current_user_id(
    request: Request,
    token: str = Depends(oauth2_scheme),
) -> uuid.UUID:
    """Dependency yielding the authenticated caller's user id."""
    if token:
        return AuthService.get_user_id_from_token(token)

    token_from_cookie = request.cookies.get("access_token")
    if token_from_cookie:
        return AuthService.get_user_id_from_token(token_from_cookie)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
