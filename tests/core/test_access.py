"""Tests for role and branch access rules."""

import pytest

from stockledger.core.entities.actor import Actor, Role
from stockledger.core.exceptions import AccessDeniedError
from stockledger.core.services.access import (
    Permission,
    authorize,
    can_access_branch,
    scoped_branch,
)

ADMIN = Actor(actor_id="root", role=Role.ADMIN)
MANAGER = Actor(actor_id="mgr", role=Role.BRANCH_MANAGER, branch_id=1)
CLERK = Actor(actor_id="clerk", role=Role.USER, branch_id=1)


class TestAuthorize:
    @pytest.mark.parametrize("permission", list(Permission))
    def test_admin_can_do_everything_everywhere(self, permission):
        authorize(ADMIN, permission, branch_id=99)

    def test_user_records_movements_at_own_branch(self):
        authorize(CLERK, Permission.RECORD_MOVEMENT, 1)
        authorize(CLERK, Permission.COUNT_AUDIT, 1)

    def test_user_cannot_close_audit(self):
        with pytest.raises(AccessDeniedError):
            authorize(CLERK, Permission.CLOSE_AUDIT, 1)

    def test_user_cannot_view_reports(self):
        with pytest.raises(AccessDeniedError):
            authorize(CLERK, Permission.VIEW_REPORTS, 1)

    def test_manager_adjusts_own_branch(self):
        authorize(MANAGER, Permission.ADJUST_INVENTORY, 1)
        authorize(MANAGER, Permission.VOID_DOCUMENT, 1)

    def test_manager_denied_other_branch(self):
        with pytest.raises(AccessDeniedError) as exc:
            authorize(MANAGER, Permission.RECORD_MOVEMENT, 2)
        assert exc.value.details["branch_id"] == 2

    def test_catalog_is_admin_only(self):
        with pytest.raises(AccessDeniedError):
            authorize(MANAGER, Permission.MANAGE_CATALOG)


class TestBranchScope:
    def test_can_access_branch(self):
        assert can_access_branch(ADMIN, 5)
        assert can_access_branch(CLERK, 1)
        assert not can_access_branch(CLERK, 2)
        assert not can_access_branch(CLERK, None)

    def test_admin_keeps_requested_filter(self):
        assert scoped_branch(ADMIN, None) is None
        assert scoped_branch(ADMIN, 3) == 3

    def test_non_admin_pinned_to_own_branch(self):
        assert scoped_branch(CLERK, None) == 1
        assert scoped_branch(CLERK, 1) == 1

    def test_non_admin_asking_for_other_branch(self):
        with pytest.raises(AccessDeniedError):
            scoped_branch(MANAGER, 2)
