"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dewy_testapp.domain import BuildInfo


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for build metadata, socket acquisition and shutdown.

    Environment variable names map directly to field names in uppercase.
    Example: `fallback_port` reads from `FALLBACK_PORT`.

    Attributes:
        application_name: Name reported by the greeting endpoint.
        app_version: Semantic version string reported by diagnostic endpoints.
        app_commit: Build commit identifier.
        app_build_date: Build date label.
        fallback_host: Interface bound when no supervisor sockets are available.
        fallback_port: Port bound when no supervisor sockets are available.
        listen_backlog: Listen queue length for self-bound sockets.
        shutdown_grace_seconds: Bound for in-flight requests during shutdown.
        server_starter_env_name: Environment variable carrying the socket handoff.
        access_log_enabled: Whether per-request access lines are logged.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    application_name: str = Field(default="dewy-testapp")
    app_version: str = Field(default="0.0.0-dev")
    app_commit: str = Field(default="none")
    app_build_date: str = Field(default="unknown")
    fallback_host: str = Field(default="0.0.0.0")
    fallback_port: int = Field(default=3333, ge=1, le=65535)
    listen_backlog: int = Field(default=2048, ge=1)
    shutdown_grace_seconds: float = Field(default=5.0, gt=0)
    server_starter_env_name: str = Field(default="SERVER_STARTER_PORT", min_length=1)
    access_log_enabled: bool = Field(default=True)

    @field_validator("application_name", "app_version", "server_starter_env_name")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    def settings_build_info(self) -> BuildInfo:
        """Return immutable build metadata derived from settings.

        Returns:
            BuildInfo: Frozen build metadata shared by every listener context.
        """

        return BuildInfo(
            application_name=self.application_name,
            version=self.app_version,
            commit=self.app_commit,
            build_date=self.app_build_date,
        )


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


class VersionSettings(BaseSettings):
    """Version-only view of the settings sources, independent of other fields."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_version: str = Field(default=AppSettings.model_fields["app_version"].default)


def config_load_version() -> str:
    """Read the reported version without validating unrelated settings.

    Returns:
        str: `APP_VERSION` from environment or dotenv, or the default when blank.
    """

    return VersionSettings().app_version.strip() or AppSettings.model_fields["app_version"].default
