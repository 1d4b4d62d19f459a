"""Domain package."""

from .cart import Cart, CartItem, MenuSummary, RestaurantSummary
from .entities import Menu, Restaurant, User
from .order import Order, OrderItem, Payment
from .value_objects import (
    Language,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    UserRole,
)

__all__ = [
    # Cart
    "Cart",
    "CartItem",
    "MenuSummary",
    "RestaurantSummary",
    # Entities
    "User",
    "Restaurant",
    "Menu",
    # Orders
    "Order",
    "OrderItem",
    "Payment",
    # Value Objects
    "Language",
    "UserRole",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
]
