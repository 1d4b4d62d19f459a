"""
Handlers package - modular bot handlers using aiogram Router

common/             - Shared dependencies, states and commands
  ├── __init__.py   - Exports common_router
  ├── router.py     - Main router combining sub-routers
  ├── states.py     - All FSM states
  ├── utils.py      - Dependencies, language, errors, safe message helpers
  └── commands.py   - /start, /help, language, login/logout, cancel

customer/           - Customer functionality
  ├── menu.py       - Restaurants, menus, add-to-cart dialog
  ├── cart/         - Cart view, notes editing, checkout
  ├── payment_proof - Payment confirmation and proof upload
  └── orders/       - Order history and "Pay now"

admin/              - Staff functionality
  └── payments      - Payment verification (confirm/reject)
"""
