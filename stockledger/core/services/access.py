"""
Role and branch rules for actors supplied by the identity provider.

Admins act on every branch. Branch managers and users are confined to
their own branch; some operations need a manager.
"""

from enum import Enum

from stockledger.core.entities.actor import Actor, Role
from stockledger.core.exceptions import AccessDeniedError


class Permission(str, Enum):
    RECORD_MOVEMENT = "record_movement"
    COUNT_AUDIT = "count_audit"
    CLOSE_AUDIT = "close_audit"
    ADJUST_INVENTORY = "adjust_inventory"
    VOID_DOCUMENT = "void_document"
    VIEW_REPORTS = "view_reports"
    MANAGE_CATALOG = "manage_catalog"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.BRANCH_MANAGER: frozenset(
        {
            Permission.RECORD_MOVEMENT,
            Permission.COUNT_AUDIT,
            Permission.CLOSE_AUDIT,
            Permission.ADJUST_INVENTORY,
            Permission.VOID_DOCUMENT,
            Permission.VIEW_REPORTS,
        }
    ),
    Role.USER: frozenset({Permission.RECORD_MOVEMENT, Permission.COUNT_AUDIT}),
}


def can_access_branch(actor: Actor, branch_id: int | None) -> bool:
    """Admins see every branch; others only their own."""
    if actor.is_admin:
        return True
    return branch_id is not None and actor.branch_id == branch_id


def authorize(actor: Actor, permission: Permission, branch_id: int | None = None) -> None:
    """Raise AccessDeniedError unless ``actor`` may do ``permission`` at ``branch_id``."""
    if permission not in ROLE_PERMISSIONS[actor.role]:
        raise AccessDeniedError(actor.actor_id, permission.value, branch_id)
    if branch_id is not None and not can_access_branch(actor, branch_id):
        raise AccessDeniedError(actor.actor_id, permission.value, branch_id)


def scoped_branch(actor: Actor, requested: int | None) -> int | None:
    """
    Branch filter for read queries.

    Non-admins always get their own branch; asking for another one is denied.
    """
    if actor.is_admin:
        return requested
    if requested is not None and requested != actor.branch_id:
        raise AccessDeniedError(actor.actor_id, "read", requested)
    return actor.branch_id
