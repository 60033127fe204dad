"""
Product Model Module

Products form the public phone catalogue. They have no owner: any authenticated
client may read them, only admins may create or delete them.
"""
from typing import Optional
from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Attributes:
        id: Auto-incrementing primary key
        title: Product name (required, 1 to 255 characters)
        price: Unit price, never negative when set
        description: Marketing description
        features: Technical features
        text: Additional free text
    """
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255, nullable=False)
    price: Optional[float] = None

    # Long text fields
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    features: Optional[str] = Field(default=None, sa_column=Column(Text))
    text: Optional[str] = Field(default=None, sa_column=Column(Text))
