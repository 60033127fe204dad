"""
Authentication Endpoints Module

Clients exchange their email and password for a JWT bearer token. The token is
also set as an HTTP-only cookie for browser clients.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from datetime import timedelta
from bilemo.db.session import get_db
from bilemo.models.client import Client
from bilemo.core.security import verify_password, create_access_token
from bilemo.core.config import settings
from bilemo.schemas.auth import Token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(response: Response, db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Authenticate a client and issue an access token.

    Note: OAuth2PasswordRequestForm uses the 'username' field, we treat it as the email.

    Raises:
        HTTPException 401: If credentials are invalid
    """
    client = db.exec(select(Client).where(Client.email == form_data.username)).first()

    if not client or not verify_password(form_data.password, client.password):
        logger.warning("Failed login attempt for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        subject=client.email, expires_delta=access_token_expires
    )

    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax"
    )

    return {"access_token": access_token, "token_type": "bearer"}
