"""Customer orders router."""
from aiogram import Router

from . import my_orders

router = Router(name="customer_orders")
router.include_router(my_orders.router)
