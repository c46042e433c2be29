import pytest

from journal_admin.config import Settings, get_settings, reset_settings

# Tests for Settings.from_env() validation


@pytest.fixture
def base_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000")
    for name in ("UNMAPPED_ROUTE_POLICY", "ADMIN_LOGIN_PATH", "BOOTSTRAP_ADMIN_EMAIL", "BOOTSTRAP_ADMIN_NAME"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_allowed_origins_csv_format(base_env: pytest.MonkeyPatch) -> None:
    """Test that ALLOWED_ORIGINS can be parsed as CSV."""
    base_env.setenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8080")

    settings = Settings.from_env()

    assert settings.allowed_origins == ["http://localhost:3000", "http://localhost:8080"]


def test_allowed_origins_json_array_format(base_env: pytest.MonkeyPatch) -> None:
    """Test that ALLOWED_ORIGINS can be parsed as JSON array."""
    base_env.setenv("ALLOWED_ORIGINS", '["http://localhost:3000", "http://localhost:8080"]')

    settings = Settings.from_env()

    assert settings.allowed_origins == ["http://localhost:3000", "http://localhost:8080"]


def test_allowed_origins_csv_with_whitespace(base_env: pytest.MonkeyPatch) -> None:
    """Test that CSV format handles whitespace correctly."""
    base_env.setenv("ALLOWED_ORIGINS", " http://localhost:3000 , http://localhost:8080 ")

    settings = Settings.from_env()

    assert settings.allowed_origins == ["http://localhost:3000", "http://localhost:8080"]


def test_allowed_origins_rejects_wildcard(base_env: pytest.MonkeyPatch) -> None:
    """Test that ALLOWED_ORIGINS rejects wildcard when credentials are used."""
    base_env.setenv("ALLOWED_ORIGINS", "*")

    with pytest.raises(ValueError, match=r"cannot contain '\*' when credentialed requests"):
        Settings.from_env()


def test_allowed_origins_rejects_malformed_json(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("ALLOWED_ORIGINS", '["http://localhost:3000"')

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS JSON is malformed"):
        Settings.from_env()


def test_allowed_origins_rejects_empty(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("ALLOWED_ORIGINS", "")

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS environment variable must be set"):
        Settings.from_env()


def test_allowed_origins_rejects_invalid_url(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("ALLOWED_ORIGINS", "not-a-url,http://localhost:3000")

    with pytest.raises(ValueError, match="must contain valid http/https origins"):
        Settings.from_env()


def test_secret_key_required(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("SECRET_KEY", "   ")

    with pytest.raises(ValueError, match="SECRET_KEY environment variable must be set"):
        Settings.from_env()


def test_unmapped_route_policy_defaults_to_allow(base_env: pytest.MonkeyPatch) -> None:
    """Unmapped admin routes stay reachable unless the deny policy is chosen."""
    settings = Settings.from_env()

    assert settings.unmapped_route_policy == "allow"
    assert settings.unmapped_routes_allowed is True


def test_unmapped_route_policy_deny(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("UNMAPPED_ROUTE_POLICY", " DENY ")

    settings = Settings.from_env()

    assert settings.unmapped_routes_allowed is False


def test_unmapped_route_policy_rejects_unknown(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("UNMAPPED_ROUTE_POLICY", "maybe")

    with pytest.raises(ValueError, match="UNMAPPED_ROUTE_POLICY must be one of: allow, deny"):
        Settings.from_env()


def test_admin_login_path_must_be_absolute(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("ADMIN_LOGIN_PATH", "admin/login")

    with pytest.raises(ValueError, match="ADMIN_LOGIN_PATH must be an absolute path"):
        Settings.from_env()


def test_bootstrap_admin_email_validated(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("BOOTSTRAP_ADMIN_EMAIL", "root-at-example")

    with pytest.raises(ValueError, match="BOOTSTRAP_ADMIN_EMAIL must be a valid email address"):
        Settings.from_env()


def test_bootstrap_admin_defaults(base_env: pytest.MonkeyPatch) -> None:
    base_env.setenv("BOOTSTRAP_ADMIN_EMAIL", "root@example.com")
    base_env.setenv("BOOTSTRAP_ADMIN_NAME", "  ")

    settings = Settings.from_env()

    assert settings.bootstrap_admin_email == "root@example.com"
    assert settings.bootstrap_admin_name == "Super Admin"


def test_reset_settings_rereads_environment(base_env: pytest.MonkeyPatch) -> None:
    reset_settings()
    try:
        base_env.setenv("APP_NAME", "Law Review Admin")
        assert get_settings().app_name == "Law Review Admin"
    finally:
        reset_settings()
