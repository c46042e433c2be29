"""Shared test fixtures and configuration."""
import os

import pytest

# Required settings for modules that read configuration at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-journal-admin-suite")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")

from journal_admin.auth.rbac_contract import Role  # noqa: E402
from journal_admin.crud.actor import InMemoryActorDirectory  # noqa: E402
from journal_admin.models.actor import Actor  # noqa: E402
from tests.actor_helpers import make_actor  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def super_admin() -> Actor:
    return make_actor(Role.SUPER_ADMIN, name="Root Admin", email="root@example.com")


@pytest.fixture
def admin() -> Actor:
    return make_actor(Role.ADMIN, name="Site Admin", email="admin@example.com")


@pytest.fixture
def editor() -> Actor:
    return make_actor(Role.EDITOR, name="Desk Editor", email="editor@example.com")


@pytest.fixture
def author() -> Actor:
    return make_actor(Role.AUTHOR, name="Staff Author", email="author@example.com")


@pytest.fixture
def viewer() -> Actor:
    return make_actor(Role.VIEWER, name="Read Only", email="viewer@example.com")


@pytest.fixture
def directory(super_admin, admin, editor, author, viewer) -> InMemoryActorDirectory:
    return InMemoryActorDirectory([super_admin, admin, editor, author, viewer])
