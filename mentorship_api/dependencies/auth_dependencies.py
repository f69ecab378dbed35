# mentorship_api/dependencies/auth_dependencies.py
from fastapi import Depends
from ..core.transitions import Actor
from ..models import User
from ..security import get_current_user

def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    """Identity and role set of the authenticated user, as seen by the transition rules."""
    return Actor(id=current_user.id, roles=current_user.role_set)
