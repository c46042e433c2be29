import json
import os
import re
import threading
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()

UNMAPPED_ROUTE_POLICIES = ("allow", "deny")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _parse_allowed_origins(raw: str) -> list[str]:
    # Support both CSV format and JSON array format
    if raw.startswith("["):
        try:
            parsed_list = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"ALLOWED_ORIGINS JSON is malformed: {exc}") from exc
        if not isinstance(parsed_list, list):
            raise ValueError("ALLOWED_ORIGINS JSON must be an array")
        origins = [
            origin.strip() for origin in parsed_list if isinstance(origin, str) and origin.strip()
        ]
    else:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

    if not origins:
        raise ValueError("ALLOWED_ORIGINS must contain at least one origin")

    if "*" in origins:
        raise ValueError(
            "ALLOWED_ORIGINS cannot contain '*' when credentialed requests are used"
        )

    for origin in origins:
        parsed = urlparse(origin)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                "ALLOWED_ORIGINS must contain valid http/https origins with host"
            )
    return origins


class Settings(BaseModel):
    app_name: str = Field(default="Journal Admin")
    debug: bool = Field(default=False)
    secret_key: str | None = Field(default=None)
    algorithm: str = Field(default="HS256")
    allowed_origins: list[str] = Field(default_factory=list)
    unmapped_route_policy: str = Field(default="allow")
    admin_login_path: str = Field(default="/admin/login")
    bootstrap_admin_email: str | None = Field(default=None)
    bootstrap_admin_name: str = Field(default="Super Admin")

    @property
    def unmapped_routes_allowed(self) -> bool:
        return self.unmapped_route_policy == "allow"

    @classmethod
    def from_env(cls) -> "Settings":
        secret_key = os.getenv("SECRET_KEY", "").strip()
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set")

        raw_allowed_origins = os.getenv("ALLOWED_ORIGINS", "").strip()
        if not raw_allowed_origins:
            raise ValueError("ALLOWED_ORIGINS environment variable must be set")
        allowed_origins = _parse_allowed_origins(raw_allowed_origins)

        unmapped_route_policy = os.getenv(
            "UNMAPPED_ROUTE_POLICY", cls.model_fields["unmapped_route_policy"].default
        ).strip().lower()
        if unmapped_route_policy not in UNMAPPED_ROUTE_POLICIES:
            raise ValueError(
                "UNMAPPED_ROUTE_POLICY must be one of: " + ", ".join(UNMAPPED_ROUTE_POLICIES)
            )

        admin_login_path = os.getenv(
            "ADMIN_LOGIN_PATH", cls.model_fields["admin_login_path"].default
        ).strip()
        if not admin_login_path.startswith("/"):
            raise ValueError("ADMIN_LOGIN_PATH must be an absolute path")

        bootstrap_admin_email = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "").strip() or None
        if bootstrap_admin_email is not None and not _EMAIL_RE.match(bootstrap_admin_email):
            raise ValueError("BOOTSTRAP_ADMIN_EMAIL must be a valid email address")

        return cls(
            app_name=os.getenv("APP_NAME", cls.model_fields["app_name"].default),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            secret_key=secret_key,
            algorithm=os.getenv("ALGORITHM", cls.model_fields["algorithm"].default),
            allowed_origins=allowed_origins,
            unmapped_route_policy=unmapped_route_policy,
            admin_login_path=admin_login_path,
            bootstrap_admin_email=bootstrap_admin_email,
            bootstrap_admin_name=os.getenv(
                "BOOTSTRAP_ADMIN_NAME", cls.model_fields["bootstrap_admin_name"].default
            ).strip()
            or cls.model_fields["bootstrap_admin_name"].default,
        )


# Settings are validated on first access, not at import time
_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get settings instance, creating it on first access.

    Uses double-checked locking so concurrent first accesses build a single
    instance.

    Raises:
        ValueError: If required environment variables are missing or invalid
    """
    global _settings_instance

    if _settings_instance is not None:
        return _settings_instance

    with _settings_lock:
        if _settings_instance is None:
            _settings_instance = Settings.from_env()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class _SettingsProxy:
    """Proxy to defer settings creation until first attribute access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]
