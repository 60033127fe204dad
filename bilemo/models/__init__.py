from .client import Client, ClientRole
from .user import User
from .product import Product

__all__ = [
    "Client", "ClientRole",
    "User",
    "Product",
]
