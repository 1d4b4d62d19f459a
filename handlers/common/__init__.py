"""
Common handlers - shared dependencies, states and commands.
"""
from handlers.common.router import router as common_router
from handlers.common.states import CartEdit, Login, MenuDialog, PaymentProof
from handlers.common.utils import get_deps, get_lang, setup_dependencies

__all__ = [
    # Router
    "common_router",
    # States
    "Login",
    "MenuDialog",
    "CartEdit",
    "PaymentProof",
    # Utils
    "setup_dependencies",
    "get_deps",
    "get_lang",
]
