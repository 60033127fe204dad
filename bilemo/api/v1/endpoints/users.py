"""
User Endpoints Module

This module provides CRUD endpoints for the users a client manages. A client only
ever sees its own users: listing is filtered by owner, and every per-user route
checks ownership before touching the record.
"""
import logging
from typing import Any, List
from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlmodel import Session, select

from bilemo.api import deps
from bilemo.core.cache import USERS_TAG, TagAwareCache, get_cache
from bilemo.core.errors import ValidationFailed, violations_from_errors
from bilemo.core.serializer import (
    USERS_GROUP,
    SerializationContext,
    normalize_many,
    project,
    to_payload,
)
from bilemo.core.versioning import get_api_version
from bilemo.db.session import get_db
from bilemo.models.client import Client
from bilemo.models.user import User
from bilemo.schemas.user import UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

NO_RIGHTS_MESSAGE = "You are lost. You do not have the rights."
USER_NOT_FOUND_MESSAGE = "This user does not exist."

# The comment field is only read from, and written to, version 2 payloads
COMMENT_MIN_VERSION = 2.0


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", name="list_users", responses={200: {"model": List[UserRead]}})
def list_users(
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Retrieve the users owned by the calling client.

    The normalized list is cached per client under the usersCache tag; the
    version gate is applied on the way out.
    """
    def load_users():
        statement = select(User).where(User.client_id == current_client.id).order_by(User.id)
        return normalize_many(db.exec(statement).all(), USERS_GROUP)

    rows = cache.get(f"getAllUsers-{current_client.id}", load_users, tags=[USERS_TAG])
    context = SerializationContext(group=USERS_GROUP, version=version)
    return JSONResponse(content=[project(row, context) for row in rows])


@router.post(
    "",
    name="create_user",
    status_code=status.HTTP_201_CREATED,
    responses={201: {"model": UserRead}},
)
def create_user(
    user_in: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Create a user owned by the calling client.

    Whatever client the payload names, the new user always belongs to the caller.
    """
    user = User(
        username=user_in.username,
        comment=user_in.comment,
        client_id=current_client.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    cache.invalidate_tags([USERS_TAG])
    logger.info("Client %s created user %s", current_client.id, user.id)

    location = str(request.url_for("get_user", user_id=user.id))
    return JSONResponse(
        content=to_payload(user, SerializationContext(group=USERS_GROUP, version=version)),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location},
    )


@router.get(
    "/{user_id}",
    name="get_user",
    responses={200: {"model": UserRead}, **deps.OWNERSHIP_DENIED_RESPONSES},
)
def read_user(
    user_id: int = Path(ge=1, le=deps.MAX_ID),
    db: Session = Depends(get_db),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Get one of the caller's users.

    Raises:
        HTTPException 404: If the user doesn't exist
    """
    user = _get_user_or_404(db, user_id)
    if not deps.owns(current_client, user):
        return deps.ownership_denied(current_client, user, NO_RIGHTS_MESSAGE)

    return JSONResponse(
        content=to_payload(user, SerializationContext(group=USERS_GROUP, version=version))
    )


@router.put(
    "/{user_id}",
    name="update_user",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=deps.OWNERSHIP_DENIED_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UserUpdate.model_json_schema()}},
        }
    },
)
def update_user(
    user_id: int = Path(ge=1, le=deps.MAX_ID),
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Replace one of the caller's users.

    Ownership is checked before the body is validated, so a client sending
    anything to another client's user gets the ownership response.
    The username is always taken from the payload, the comment only for version 2
    requests. ``idClient`` hands the user over to another client; without it the
    caller stays (or becomes) the owner.

    Raises:
        HTTPException 404: If the user doesn't exist
        ValidationFailed: If the body is invalid or idClient names a client that doesn't exist
    """
    user = _get_user_or_404(db, user_id)
    if not deps.owns(current_client, user):
        return deps.ownership_denied(current_client, user, USER_NOT_FOUND_MESSAGE)

    try:
        user_in = UserUpdate.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(violations_from_errors(e.errors()))

    owner = current_client
    if user_in.idClient is not None:
        owner = db.get(Client, user_in.idClient)
        if owner is None:
            raise ValidationFailed.single("idClient", f"Client {user_in.idClient} does not exist")

    user.username = user_in.username
    if version >= COMMENT_MIN_VERSION:
        user.comment = user_in.comment
    user.client_id = owner.id

    db.add(user)
    db.commit()

    cache.invalidate_tags([USERS_TAG])
    logger.info("Client %s updated user %s (owner %s)", current_client.id, user_id, owner.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    name="delete_user",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=deps.OWNERSHIP_DENIED_RESPONSES,
)
def delete_user(
    user_id: int = Path(ge=1, le=deps.MAX_ID),
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Delete one of the caller's users.

    Raises:
        HTTPException 404: If the user doesn't exist
    """
    user = _get_user_or_404(db, user_id)
    if not deps.owns(current_client, user):
        return deps.ownership_denied(current_client, user, USER_NOT_FOUND_MESSAGE)

    db.delete(user)
    db.commit()

    cache.invalidate_tags([USERS_TAG])
    logger.info("Client %s deleted user %s", current_client.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
