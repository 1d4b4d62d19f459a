"""Customer handlers - restaurants, cart, checkout and orders."""

from . import menu, payment_proof

__all__ = ["menu", "payment_proof"]
