"""Admin handlers - payment verification for staff accounts."""
from . import payments

__all__ = ["payments"]
