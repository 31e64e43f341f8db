"""Authenticated caller as supplied by the identity provider."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    BRANCH_MANAGER = "branch_manager"
    USER = "user"


class Actor(BaseModel):
    """
    The user behind a request.

    Non-admin actors are bound to a single branch.
    """

    actor_id: str
    role: Role
    branch_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
