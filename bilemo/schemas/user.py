from pydantic import BaseModel, Field
from typing import Optional


# Shared properties
class UserBase(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    comment: Optional[str] = None


# Properties to receive via API on creation
# Any client reference in the payload is ignored, the caller always owns the new user
class UserCreate(UserBase):
    pass


# Properties to receive via API on update
class UserUpdate(UserBase):
    # Reassign the user to another client; defaults to the caller when omitted
    idClient: Optional[int] = Field(default=None, ge=1, le=2 ** 63 - 1)


# Properties to return to client
class UserRead(BaseModel):
    id: int
    username: str
    # Only present for API version 2 and above
    comment: Optional[str] = None
