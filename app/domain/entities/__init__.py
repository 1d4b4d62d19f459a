"""Domain entities package."""

from .restaurant import Menu, Restaurant
from .user import User

__all__ = [
    "User",
    "Restaurant",
    "Menu",
]
