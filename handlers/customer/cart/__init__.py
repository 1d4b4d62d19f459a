"""Cart module for customer orders.

Provides cart functionality:
- View all per-restaurant carts as one panel
- Update quantities, notes, remove items
- Clear all (with confirmation)
- Checkout into a pending order
"""
from .router import router, setup_dependencies, show_cart

__all__ = ["router", "setup_dependencies", "show_cart"]
