"""
FSM States for all bot workflows.

Organized by domain:
- Auth: Login
- Browse: MenuDialog
- Cart: CartEdit
- Payment: PaymentProof

Each StatesGroup represents a complete user flow.
"""
from __future__ import annotations

from aiogram.fsm.state import State, StatesGroup

# =============================================================================
# AUTH
# =============================================================================


class Login(StatesGroup):
    """
    Sign-in flow.

    Flow: /login → email → password → main menu
    """

    email = State()
    password = State()


# =============================================================================
# BROWSE / CART
# =============================================================================


class MenuDialog(StatesGroup):
    """Free-text notes for the menu item dialog that is open."""

    notes = State()


class CartEdit(StatesGroup):
    """
    Cart text inputs.

    Flow: 📝 on an item → notes; Checkout → optional order notes → order
    """

    item_notes = State()
    checkout_notes = State()


# =============================================================================
# PAYMENT
# =============================================================================


class PaymentProof(StatesGroup):
    """
    Checkout confirmation inputs.

    Flow: 📎 Upload proof → photo/document; 📝 Notes → text
    """

    waiting_for_proof = State()
    waiting_for_notes = State()
