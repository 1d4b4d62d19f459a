"""Cart system orchestrator for cart-related flows.

Wires the cart view, item editing and checkout submodules on one router
while exposing `router`, `setup_dependencies` and `show_cart`.
"""
from __future__ import annotations

from aiogram import Router

from . import checkout as cart_checkout
from . import edit as cart_edit
from . import view as cart_view

router = Router(name="cart")

_registered = False


def setup_dependencies() -> None:
    """Register all cart handlers on the shared router (once)."""
    global _registered
    if _registered:
        return
    cart_view.register(router)
    cart_edit.register(router)
    cart_checkout.register(router)
    _registered = True


from .view import show_cart  # noqa: E402,F401
