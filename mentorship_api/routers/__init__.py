from . import auth_router
from . import mentorship_router

__all__ = [
    "auth_router",
    "mentorship_router",
]
