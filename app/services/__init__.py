"""Business services holding per-user cart, checkout and menu state."""

from .cart_service import CartAggregator, CartRegistry
from .checkout_service import CheckoutConfirmation, CheckoutRegistry, CheckoutState
from .menu_service import MenuDialogs, MenuItemView, MenuService

__all__ = [
    "CartAggregator",
    "CartRegistry",
    "CheckoutConfirmation",
    "CheckoutRegistry",
    "CheckoutState",
    "MenuDialogs",
    "MenuItemView",
    "MenuService",
]
