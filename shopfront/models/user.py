# shopfront/models/user.py
from enum import Enum
from typing import Optional
from pydantic import BaseModel
from .base import WireModel

class UserRole(str, Enum):
    CUSTOMER = "customer"
    OWNER = "owner"

class SessionUser(WireModel):
    """User returned by token verification"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    is_verified: bool = False

class Session(BaseModel):
    """Authenticated session for one chat; replaced on login, dropped on logout"""
    token: str
    user: SessionUser

    @property
    def is_owner(self) -> bool:
        return self.user.role == UserRole.OWNER
