"""
Tests for PermissionService enforcement points and denial auditing.

Successful checks are silent; denials are logged, audited and raised as
AuthError (anonymous) or PermissionError (authenticated).
"""
import logging
from unittest.mock import MagicMock

import pytest

from journal_admin.auth.catalog import build_default_catalog
from journal_admin.auth.rbac_contract import Permission
from journal_admin.errors import AuthError, PermissionError
from journal_admin.services.admin.permission_service import PermissionService
from journal_admin.services.audit import AuditService


@pytest.fixture
def audit():
    return MagicMock(spec=AuditService)


@pytest.fixture
def permission_service(audit):
    return PermissionService(audit=audit)


class TestRequirePermission:
    def test_granted_is_silent(self, permission_service, audit, admin):
        permission_service.require_permission(admin, Permission.MANAGE_USERS)
        audit.log_permission_denied.assert_not_called()

    def test_denied_raises_permission_error(self, permission_service, audit, editor):
        with pytest.raises(PermissionError) as exc_info:
            permission_service.require_permission(editor, Permission.MANAGE_USERS)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Permission denied: manage_users required"
        audit.log_permission_denied.assert_called_once()
        kwargs = audit.log_permission_denied.call_args.kwargs
        assert kwargs["actor"] is editor
        assert kwargs["permission"] == "manage_users"

    def test_anonymous_raises_auth_error(self, permission_service, audit):
        with pytest.raises(AuthError) as exc_info:
            permission_service.require_permission(None, Permission.VIEW_DASHBOARD)

        assert exc_info.value.status_code == 401
        audit.log_permission_denied.assert_called_once()

    def test_denial_is_logged(self, permission_service, editor, caplog):
        with caplog.at_level(logging.WARNING, logger="journal_admin.rbac"):
            with pytest.raises(PermissionError):
                permission_service.require_permission(editor, "manage_roles")

        assert "Permission denied" in caplog.text
        assert "manage_roles" in caplog.text


class TestRequireRoutePermission:
    def test_route_denial_records_request(self, permission_service, audit, admin):
        with pytest.raises(PermissionError, match="manage_roles"):
            permission_service.require_route_permission(
                admin,
                "/admin/roles",
                request_method="GET",
                request_path="/admin/roles",
            )

        kwargs = audit.log_permission_denied.call_args.kwargs
        assert kwargs["route"] == "/admin/roles"
        assert kwargs["request_method"] == "GET"
        assert kwargs["request_path"] == "/admin/roles"

    def test_super_admin_passes(self, permission_service, audit, super_admin):
        permission_service.require_route_permission(super_admin, "/admin/permissions")
        audit.log_permission_denied.assert_not_called()

    def test_unmapped_route_allowed_by_default(self, permission_service):
        permission_service.require_route_permission(None, "/admin/settings")

    def test_unmapped_route_denied_by_policy(self, audit, viewer):
        service = PermissionService(build_default_catalog(unmapped_routes_allowed=False), audit)
        with pytest.raises(PermissionError) as exc_info:
            service.require_route_permission(viewer, "/admin/settings")

        assert exc_info.value.message == PermissionError.message
        assert audit.log_permission_denied.call_args.kwargs["permission"] is None


class TestQueries:
    def test_queries_delegate_to_catalog(self, permission_service, author):
        assert permission_service.has_permission(author, "manage_posts") is True
        assert permission_service.has_any_permission(author, []) is False
        assert permission_service.has_all_permissions(author, []) is True
        assert permission_service.is_super_admin(author) is False
        assert permission_service.accessible_routes(author) == ["/admin", "/admin/posts"]

    def test_introspection(self, permission_service):
        assert len(permission_service.list_permissions()) == 13
        assert len(permission_service.list_route_permissions()) == 13


class TestAuditService:
    def test_audit_entry_is_json_line(self, caplog, admin):
        with caplog.at_level(logging.INFO, logger="journal_admin.services.audit.audit_service"):
            AuditService().log_admin_action(
                actor=admin,
                action="admin.users.delete",
                target_type="actor",
                target_id=admin.id,
            )

        record = caplog.records[-1]
        assert record.getMessage().startswith("AUDIT: ")
        assert record.audit_entry["actor_id"] == str(admin.id)
        assert record.audit_entry["status"] == "success"

    def test_audit_never_raises(self, caplog):
        class Unprintable:
            def __str__(self):
                raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            AuditService().log_permission_denied(actor=None, permission=Unprintable())

        assert "Audit logging failed" in caplog.text
