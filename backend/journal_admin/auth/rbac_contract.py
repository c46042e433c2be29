"""
RBAC contract for the journal admin dashboard.

Defines the closed set of permissions and roles and the hand-maintained
allow-lists for every role except ``SUPER_ADMIN``. The super admin grant set
is never enumerated here: it is computed from the permission catalog when an
``AccessCatalog`` is built (see ``catalog.py``), so new permissions reach the
super admin without editing this module.
"""
from __future__ import annotations

from enum import Enum
from typing import Final


# ============================================================================
# PERMISSIONS
# ============================================================================

class Permission(str, Enum):
    """Atomic capabilities. The value is the wire/string form."""

    # Content management
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_POSTS = "manage_posts"
    MANAGE_AUTHORS = "manage_authors"
    MANAGE_JOURNALS = "manage_journals"
    MANAGE_ARTICLES = "manage_articles"
    MANAGE_CALL_FOR_PAPERS = "manage_call_for_papers"
    MANAGE_NOTIFICATIONS = "manage_notifications"
    MANAGE_MEDIA = "manage_media"
    MANAGE_EDITORIAL_BOARD = "manage_editorial_board"
    MANAGE_BOARD_ADVISORS = "manage_board_advisors"
    MANAGE_USERS = "manage_users"

    # Access management
    MANAGE_ROLES = "manage_roles"
    MANAGE_PERMISSIONS = "manage_permissions"


# Catalog order is declaration order
ALL_PERMISSIONS: Final[tuple[Permission, ...]] = tuple(Permission)


# ============================================================================
# ROLES
# ============================================================================

class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    AUTHOR = "AUTHOR"
    VIEWER = "VIEWER"


ALL_ROLES: Final[frozenset[Role]] = frozenset(Role)

# Display name, description
ROLE_METADATA: Final[dict[Role, tuple[str, str]]] = {
    Role.SUPER_ADMIN: (
        "Super Administrator",
        "Full access, including role and permission management",
    ),
    Role.ADMIN: (
        "Administrator",
        "Manages all content and users, but not roles or permissions",
    ),
    Role.EDITOR: (
        "Editor",
        "Manages posts, authors, journals, articles and announcements",
    ),
    Role.AUTHOR: ("Author", "Writes and manages posts"),
    Role.VIEWER: ("Viewer", "Read-only access to the dashboard"),
}


# ============================================================================
# ROLE-PERMISSION MAPPINGS
# ============================================================================

# SUPER_ADMIN is intentionally absent: its grants are the whole catalog.
ROLE_PERMISSION_MAPPINGS: Final[dict[Role, frozenset[Permission]]] = {
    Role.ADMIN: frozenset({
        Permission.VIEW_DASHBOARD,
        Permission.MANAGE_POSTS,
        Permission.MANAGE_AUTHORS,
        Permission.MANAGE_JOURNALS,
        Permission.MANAGE_ARTICLES,
        Permission.MANAGE_CALL_FOR_PAPERS,
        Permission.MANAGE_NOTIFICATIONS,
        Permission.MANAGE_MEDIA,
        Permission.MANAGE_EDITORIAL_BOARD,
        Permission.MANAGE_BOARD_ADVISORS,
        Permission.MANAGE_USERS,
        # No MANAGE_ROLES, no MANAGE_PERMISSIONS
    }),

    Role.EDITOR: frozenset({
        Permission.VIEW_DASHBOARD,
        Permission.MANAGE_POSTS,
        Permission.MANAGE_AUTHORS,
        Permission.MANAGE_JOURNALS,
        Permission.MANAGE_ARTICLES,
        Permission.MANAGE_CALL_FOR_PAPERS,
        Permission.MANAGE_NOTIFICATIONS,
    }),

    Role.AUTHOR: frozenset({
        Permission.VIEW_DASHBOARD,
        Permission.MANAGE_POSTS,
    }),

    Role.VIEWER: frozenset({
        Permission.VIEW_DASHBOARD,
    }),
}


# ============================================================================
# TOKEN PARSING
# ============================================================================

def parse_role(value: str | Role) -> Role:
    """Parse a role token.

    Raises:
        ValueError: If the token is not a known role
    """
    try:
        return Role(value)
    except ValueError:
        raise ValueError(
            f"Invalid role '{value}'. "
            f"Must be one of: {', '.join(role.value for role in Role)}"
        ) from None


def parse_permission(value: str | Permission) -> Permission:
    """Parse a permission token.

    Raises:
        ValueError: If the token is not a known permission
    """
    try:
        return Permission(value)
    except ValueError:
        raise ValueError(f"Invalid permission '{value}'") from None


def role_display_name(role: Role) -> str:
    return ROLE_METADATA[role][0]


def role_description(role: Role) -> str:
    return ROLE_METADATA[role][1]
