"""
User Model Module

Users are the end customers a client registers on the platform. Every user
belongs to exactly one client, and only that client may read or change it.
"""
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from bilemo.models.client import Client


class User(SQLModel, table=True):
    """
    Attributes:
        id: Auto-incrementing primary key
        username: Display name (required, at most 255 characters)
        comment: Free-text note, only exposed from API version 2 onwards
        client_id: Foreign key to the owning Client (never null once persisted)
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=255, nullable=False)
    comment: Optional[str] = None

    client_id: int = Field(foreign_key="clients.id", nullable=False, index=True)
    client: Optional["Client"] = Relationship(back_populates="users")
