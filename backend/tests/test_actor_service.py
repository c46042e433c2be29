"""
Tests for ActorService: the mutation policy applied on top of the directory,
with every outcome recorded in the audit trail.
"""
import uuid
from unittest.mock import MagicMock

import pytest

from journal_admin.auth.rbac_contract import Permission, Role
from journal_admin.crud.actor import InMemoryActorDirectory
from journal_admin.errors import PermissionError
from journal_admin.services.admin.actor_service import ActorService
from journal_admin.services.audit import AuditService
from tests.actor_helpers import make_actor


@pytest.fixture
def audit():
    return MagicMock(spec=AuditService)


@pytest.fixture
def service(directory, audit):
    return ActorService(directory, audit=audit)


class PromotingDirectory(InMemoryActorDirectory):
    """Promotes the target to super admin just before each mutation lands."""

    def update_actor(self, actor_id, fields, *, expected=None):
        self.set_actor_role(actor_id, Role.SUPER_ADMIN)
        return super().update_actor(actor_id, fields, expected=expected)

    def delete_actor(self, actor_id, *, expected=None):
        self.set_actor_role(actor_id, Role.SUPER_ADMIN)
        return super().delete_actor(actor_id, expected=expected)


def _audited_statuses(audit) -> list[tuple[str, str]]:
    return [
        (call.kwargs["action"], call.kwargs["status"] if "status" in call.kwargs else "success")
        for call in audit.log_admin_action.call_args_list
    ]


class TestCreateActor:
    def test_admin_creates_editor(self, service, admin, audit):
        result = service.create_actor(
            admin, {"name": "New Editor", "email": "new.editor@example.com", "role": "EDITOR"}
        )
        assert result.ok
        assert result.value.role is Role.EDITOR
        assert _audited_statuses(audit) == [("admin.users.create", "success")]

    def test_editor_cannot_create(self, service, editor, audit):
        result = service.create_actor(editor, {"name": "Someone", "email": "someone@example.com"})
        assert result.kind == "Unauthorized"
        assert isinstance(result.error, PermissionError)
        assert _audited_statuses(audit) == [("admin.users.create", "denied")]

    def test_admin_cannot_create_super_admin(self, service, admin, directory):
        result = service.create_actor(
            admin, {"name": "Sneaky Root", "email": "sneaky@example.com", "role": "SUPER_ADMIN"}
        )
        assert result.kind == "Unauthorized"
        assert "manage_roles" in result.error.message
        assert directory.find_by_email("sneaky@example.com") is None

    def test_super_admin_creates_super_admin(self, service, super_admin):
        result = service.create_actor(
            super_admin, {"name": "Second Root", "email": "root2@example.com", "role": "SUPER_ADMIN"}
        )
        assert result.ok

    def test_admin_cannot_grant_overrides_on_create(self, service, admin):
        result = service.create_actor(
            admin,
            {"name": "Overreach", "email": "over@example.com", "permissions": ["manage_roles"]},
        )
        assert result.kind == "Unauthorized"
        assert "manage_permissions" in result.error.message

    def test_invalid_fields_reported_before_role_checks(self, service, admin):
        result = service.create_actor(admin, {"name": "X", "email": "x@example.com"})
        assert result.kind == "ValidationError"

    def test_anonymous_cannot_create(self, service):
        result = service.create_actor(None, {"name": "Ghost", "email": "ghost@example.com"})
        assert result.kind == "Unauthorized"


class TestUpdateActor:
    def test_admin_renames_editor(self, service, admin, editor):
        result = service.update_actor(admin, editor.id, {"name": "Chief Editor"})
        assert result.ok
        assert result.value.name == "Chief Editor"

    def test_admin_cannot_change_role_via_update(self, service, admin, editor, directory):
        result = service.update_actor(admin, editor.id, {"role": "AUTHOR"})
        assert result.kind == "Unauthorized"
        assert directory.get_actor(editor.id).role is Role.EDITOR

    def test_same_role_is_not_a_role_change(self, service, admin, editor):
        assert service.update_actor(admin, editor.id, {"role": "EDITOR", "name": "Same Role"}).ok

    def test_admin_cannot_edit_super_admin(self, service, admin, super_admin):
        result = service.update_actor(admin, super_admin.id, {"name": "Hijacked"})
        assert result.kind == "Unauthorized"

    def test_super_admin_promotes_via_update(self, service, super_admin, viewer):
        result = service.update_actor(super_admin, viewer.id, {"role": "SUPER_ADMIN"})
        assert result.ok
        assert result.value.role is Role.SUPER_ADMIN

    def test_update_missing_actor(self, service, admin):
        assert service.update_actor(admin, uuid.uuid4(), {"name": "Nobody"}).kind == "NotFound"


class TestDeleteActor:
    def test_self_deletion_rejected(self, service, super_admin, directory):
        result = service.delete_actor(super_admin, super_admin.id)
        assert result.kind == "Unauthorized"
        assert result.error.message == "Actors cannot delete themselves"
        assert directory.get_actor(super_admin.id) is not None

    def test_admin_cannot_delete_super_admin(self, service, admin, super_admin):
        result = service.delete_actor(admin, super_admin.id)
        assert result.error.message == "Only a super admin can delete another super admin"

    def test_super_admin_deletes_super_admin(self, service, super_admin, directory):
        other = directory.create_actor(
            {"name": "Other Root", "email": "other.root@example.com", "role": "SUPER_ADMIN"}
        ).unwrap()
        assert service.delete_actor(super_admin, other.id).ok
        assert directory.get_actor(other.id) is None

    def test_admin_deletes_viewer(self, service, admin, viewer, audit):
        assert service.delete_actor(admin, viewer.id).ok
        assert _audited_statuses(audit) == [("admin.users.delete", "success")]

    def test_delete_missing(self, service, admin):
        assert service.delete_actor(admin, uuid.uuid4()).kind == "NotFound"


class TestRoleAndPermissions:
    def test_admin_cannot_change_role(self, service, admin, viewer, audit):
        result = service.change_role(admin, viewer.id, "EDITOR")
        assert result.kind == "Unauthorized"
        assert _audited_statuses(audit) == [("admin.users.roles.update", "denied")]

    def test_super_admin_changes_role(self, service, super_admin, viewer, audit):
        result = service.change_role(super_admin, viewer.id, Role.EDITOR)
        assert result.ok
        assert result.value.role is Role.EDITOR
        payload = audit.log_admin_action.call_args.kwargs["payload"]
        assert payload == {"from": "VIEWER", "to": "EDITOR"}

    def test_change_to_unknown_role(self, service, super_admin, viewer):
        assert service.change_role(super_admin, viewer.id, "OWNER").kind == "ValidationError"

    def test_change_role_missing_actor(self, service, super_admin):
        assert service.change_role(super_admin, uuid.uuid4(), "EDITOR").kind == "NotFound"

    def test_manage_roles_override(self, directory, viewer):
        acting = make_actor(Role.ADMIN, [Permission.MANAGE_ROLES])
        service = ActorService(directory, audit=MagicMock(spec=AuditService))
        assert service.change_role(acting, viewer.id, "AUTHOR").ok

    def test_admin_cannot_set_permissions(self, service, admin, viewer):
        assert service.set_permissions(admin, viewer.id, ["manage_media"]).kind == "Unauthorized"

    def test_super_admin_sets_permissions(self, service, super_admin, viewer):
        result = service.set_permissions(super_admin, viewer.id, ["manage_media"])
        assert result.ok
        assert result.value.permissions == {Permission.MANAGE_MEDIA}

    def test_get_and_list(self, service, editor):
        assert service.get_actor(editor.id).unwrap() == editor
        assert len(service.list_actors()) == 5


class TestConcurrentPromotion:
    """A target promoted after the policy check must not be mutated."""

    @pytest.fixture
    def promoting(self, super_admin, admin, editor):
        return PromotingDirectory([super_admin, admin, editor])

    def test_delete_refused_after_promotion(self, promoting, admin, editor, audit):
        service = ActorService(promoting, audit=audit)
        result = service.delete_actor(admin, editor.id)

        assert result.kind == "Conflict"
        stored = promoting.get_actor(editor.id)
        assert stored is not None
        assert stored.role is Role.SUPER_ADMIN
        audit.log_admin_action.assert_not_called()

    def test_update_refused_after_promotion(self, promoting, admin, editor, audit):
        service = ActorService(promoting, audit=audit)
        result = service.update_actor(admin, editor.id, {"name": "Hijacked"})

        assert result.kind == "Conflict"
        assert promoting.get_actor(editor.id).name == "Desk Editor"
        audit.log_admin_action.assert_not_called()
