"""
Route guard decisions for the admin dashboard.

Turns an evaluator answer into what the dashboard should do next: render the
page, or redirect. Anonymous visitors of a protected page go to the login
page; authenticated actors who lack the dashboard permission go back to the
public site; any other denial lands on the dashboard home.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..auth.catalog import DEFAULT_CATALOG, AccessCatalog
from ..auth.enforcement_matrix import ADMIN_ROOT
from ..auth.evaluator import has_route_permission

PUBLIC_HOME = "/"
DEFAULT_LOGIN_PATH = "/admin/login"


@dataclass(frozen=True)
class RouteDecision:
    route: str
    allowed: bool
    redirect_to: str | None = None


def resolve_route_access(
    actor: Any,
    route: str,
    *,
    catalog: AccessCatalog = DEFAULT_CATALOG,
    login_path: str = DEFAULT_LOGIN_PATH,
) -> RouteDecision:
    if route == login_path or has_route_permission(actor, route, catalog=catalog):
        return RouteDecision(route=route, allowed=True)
    if actor is None:
        return RouteDecision(route=route, allowed=False, redirect_to=login_path)
    if route == ADMIN_ROOT:
        return RouteDecision(route=route, allowed=False, redirect_to=PUBLIC_HOME)
    return RouteDecision(route=route, allowed=False, redirect_to=ADMIN_ROOT)
