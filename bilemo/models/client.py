"""
Client Model Module

This module defines the Client model and ClientRole enumeration. Clients are the
authenticated principals of the API: every request is made on behalf of a client,
and each client owns the users it created.
"""
from enum import Enum
from typing import List, Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, JSON, Column, Relationship

if TYPE_CHECKING:
    from bilemo.models.user import User


class ClientRole(str, Enum):
    """
    Enumeration of client roles.

    - USER: Regular client; reads the catalogue and manages its own users
    - ADMIN: Catalogue administrator; may also create and delete products
    """
    USER = "user"
    ADMIN = "admin"


class Client(SQLModel, table=True):
    """
    Client model representing an API consumer (a BileMo business partner).

    Attributes:
        id: Auto-incrementing primary key
        name: Display name of the client
        email: Login identifier (required, unique, indexed)
        password: Hashed password (bcrypt)
        roles: List of ClientRole values (default: [USER])
        users: Users owned by this client
    """
    __tablename__ = "clients"

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(nullable=False)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    # Authorization - stored as JSON array in database
    roles: List[ClientRole] = Field(default=[ClientRole.USER], sa_column=Column(JSON))

    users: List["User"] = Relationship(
        back_populates="client",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def is_admin(self) -> bool:
        """Helper to check if the client holds the admin role."""
        return ClientRole.ADMIN in (self.roles or [])
