"""
API Dependencies Module

This module provides FastAPI dependency functions for authentication and authorization.
Clients authenticate with a bearer token; an HTTP-only ``access_token`` cookie set at
login is accepted as a fallback for browser-based consumers.
"""
import logging
from typing import List, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from pydantic import ValidationError
from sqlmodel import Session, select

from bilemo.core.config import settings
from bilemo.db.session import get_db
from bilemo.models.client import Client, ClientRole
from bilemo.models.user import User
from bilemo.schemas.auth import TokenData

logger = logging.getLogger(__name__)

# auto_error=False allows us to check cookies as a fallback
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False  # Don't raise error immediately if Authorization header is missing
)


def get_current_client(
    request: Request,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(reusable_oauth2)
) -> Client:
    """
    Dependency that retrieves and validates the calling client.

    The bearer token in the Authorization header wins; the access_token cookie
    is only read when the header is missing.

    Raises:
        HTTPException 401: If no token is provided
        HTTPException 403: If the token is invalid or expired
        HTTPException 404: If the client referenced in the token doesn't exist
    """
    if not token:
        token = request.cookies.get("access_token")
        # Cookie format is "Bearer <token>"
        if token and token.startswith("Bearer "):
            token = token.replace("Bearer ", "")

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        token_data = TokenData(email=payload.get("sub"))
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    client = db.exec(select(Client).where(Client.email == token_data.email)).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


class RoleChecker:
    """
    Dependency factory for checking client roles.

    Usage: Depends(RoleChecker([ClientRole.ADMIN], "Not allowed to create a product"))
    """
    def __init__(self, allowed_roles: List[ClientRole], message: Optional[str] = None):
        self.allowed_roles = allowed_roles
        self.message = message or "The client does not have enough privileges"

    def __call__(self, current_client: Client = Depends(get_current_client)) -> Client:
        if not any(role in (current_client.roles or []) for role in self.allowed_roles):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=self.message)
        return current_client


def owns(client: Client, user: User) -> bool:
    """True when ``user`` belongs to ``client``."""
    return user.client_id is not None and user.client_id == client.id


def ownership_denied(client: Client, user: User, message: str) -> JSONResponse:
    """
    Response returned when a client reaches for a user it does not own.

    The body is the bare message; the status comes from OWNERSHIP_DENIED_STATUS.
    """
    logger.warning("Client %s denied access to user %s", client.id, user.id)
    return JSONResponse(content=message, status_code=settings.OWNERSHIP_DENIED_STATUS)


# OpenAPI description of the ownership-mismatch response
OWNERSHIP_DENIED_RESPONSES = {
    settings.OWNERSHIP_DENIED_STATUS: {
        "description": "The user belongs to another client",
        "content": {"application/json": {"schema": {"type": "string"}}},
    },
}

# Largest id a SQLite/MySQL signed 64-bit INTEGER column can hold
MAX_ID = 2 ** 63 - 1
