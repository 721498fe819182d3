from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "fleetdesk-jwt-secret"
ALLOWED_APP_MODES = {"development", "production"}
ALLOWED_SCOPE_VIOLATION_MODES = {"forbidden", "not_found"}
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_name: str = "FleetDesk Dispatch API"
    app_mode: str = Field(default="development", validation_alias="FLEETDESK_APP_MODE")

    database_url: str = Field(
        default="sqlite+pysqlite:///./fleetdesk.db",
        validation_alias="FLEETDESK_DATABASE_URL",
    )
    cors_allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_in_s: int = 7 * 24 * 60 * 60
    allowed_roles: str = "USER,DISPATCHER,MANAGER,ADMIN"
    enable_test_auth_bypass: bool = False
    testing: bool = Field(default=False, validation_alias="FLEETDESK_TESTING")

    auto_create_schema: bool = True
    require_migrations: bool = False

    scope_violation_mode: str = Field(
        default="forbidden", validation_alias="FLEETDESK_SCOPE_VIOLATION_MODE"
    )
    enforce_order_transitions: bool = False
    order_number_max_attempts: int = 10

    upload_max_bytes: int = 10 * 1024 * 1024
    allowed_document_extensions: str = ".pdf,.jpg,.jpeg,.png"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("app_mode")
    @classmethod
    def validate_app_mode(cls, value: str) -> str:
        mode = value.lower().strip()
        if mode not in ALLOWED_APP_MODES:
            allowed = ", ".join(sorted(ALLOWED_APP_MODES))
            raise ValueError(f"FLEETDESK_APP_MODE must be one of: {allowed}")
        return mode

    @field_validator("scope_violation_mode")
    @classmethod
    def validate_scope_violation_mode(cls, value: str) -> str:
        mode = value.lower().strip()
        if mode not in ALLOWED_SCOPE_VIOLATION_MODES:
            allowed = ", ".join(sorted(ALLOWED_SCOPE_VIOLATION_MODES))
            raise ValueError(f"FLEETDESK_SCOPE_VIOLATION_MODE must be one of: {allowed}")
        return mode


settings = Settings()


def is_production_mode() -> bool:
    return settings.app_mode == "production"


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]


def allowed_roles_list() -> list[str]:
    return [value.strip() for value in settings.allowed_roles.split(",") if value.strip()]


def allowed_document_extensions() -> set[str]:
    return {
        value.strip().lower()
        for value in settings.allowed_document_extensions.split(",")
        if value.strip()
    }


def ensure_secure_runtime_settings() -> None:
    """Fail fast when production-like runtime uses insecure defaults."""
    if settings.testing:
        return
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError(
            "JWT_SECRET must be set to a non-default value when FLEETDESK_TESTING is false"
        )
    if len(settings.jwt_secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            "JWT_SECRET must be at least "
            f"{MIN_SECRET_LENGTH} characters when FLEETDESK_TESTING is false"
        )
    if settings.enable_test_auth_bypass:
        raise RuntimeError("ENABLE_TEST_AUTH_BYPASS must be off when FLEETDESK_TESTING is false")
    if is_production_mode() and _is_sqlite_url(settings.database_url):
        raise RuntimeError(
            "FLEETDESK_DATABASE_URL must use postgres in FLEETDESK_APP_MODE=production"
        )


def _is_sqlite_url(database_url: str) -> bool:
    value = database_url.strip().lower()
    return value.startswith("sqlite")
