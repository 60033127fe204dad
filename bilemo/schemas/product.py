from pydantic import BaseModel, Field
from typing import Dict, Optional


# Properties to receive via API on creation
class ProductCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    features: Optional[str] = None
    text: Optional[str] = None


class Link(BaseModel):
    href: str


# Properties to return to client
class ProductRead(BaseModel):
    id: int
    title: str
    price: Optional[float] = None
    description: Optional[str] = None
    features: Optional[str] = None
    text: Optional[str] = None
    # "self" for everyone, "delete" for admins only
    links: Dict[str, Link] = Field(default_factory=dict, alias="_links")
