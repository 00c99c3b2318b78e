"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TENANCY_DB_HOST: Database host (default: localhost)
        TENANCY_DB_PORT: Database port (default: 5432)
        TENANCY_DB_DATABASE: Database name (default: tenancy)
        TENANCY_DB_USERNAME: Database user (default: tenancy)
        TENANCY_DB_PASSWORD: Database password (required in production)
        TENANCY_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TENANCY_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tenancy", description="Database name")
    username: str = Field(default="tenancy", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """Bearer token validation settings.

    Environment variables:
        TENANCY_OIDC_ISSUER_URL: OIDC issuer (realm) URL
        TENANCY_OIDC_AUDIENCE: Expected audience claim
        TENANCY_OIDC_USER_ID_CLAIM: Claim carrying the user id (default: sub)
        TENANCY_OIDC_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime (default: 86400)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/tenancy",
        description="OIDC issuer URL",
    )
    audience: str = Field(default="tenancy-api", description="Expected audience")
    user_id_claim: str = Field(default="sub", description="User id claim name")
    username_claim: str = Field(
        default="preferred_username", description="Username claim name"
    )
    jwks_cache_ttl_seconds: int = Field(default=86400, ge=0)


class TenancySettings(BaseSettings):
    """Tenancy domain settings.

    Environment variables:
        TENANCY_DEPARTMENT_LIST_LIMIT: Default page size for department listing
        TENANCY_DEFAULT_AGENT_NAME: Display name of the seeded department agent
        TENANCY_DEFAULT_AGENT_SLUG: Slug of the seeded department agent
        TENANCY_DEFAULT_AGENT_ROLE: Role line of the seeded department agent
        TENANCY_DEFAULT_AGENT_DESCRIPTION: Description of the seeded agent
        TENANCY_GMAIL_APP_RETURN_URL: Fallback return URL after Gmail OAuth
        TENANCY_OPERATOR_USER_IDS: Comma separated user ids allowed to run
            maintenance operations
        TENANCY_HOOK_ATTEMPTS: Attempts per post-creation hook (default: 2)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    department_list_limit: int = Field(default=50, ge=1, le=1000)
    default_agent_name: str = Field(default="Jarvis")
    default_agent_slug: str = Field(default="jarvis")
    default_agent_role: str = Field(default="Head of Operations")
    default_agent_description: str = Field(
        default="Department coordinator focused on orchestration and delegation.",
    )
    gmail_app_return_url: str = Field(
        default="http://localhost:5173/settings/integrations",
    )
    operator_user_ids: str = Field(default="")
    hook_attempts: int = Field(default=2, ge=1, le=10)

    @property
    def operators(self) -> frozenset[str]:
        """Parsed operator allow-list."""
        return frozenset(
            part.strip() for part in self.operator_user_ids.split(",") if part.strip()
        )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Tenancy API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def oidc(self) -> OIDCSettings:
        """Get OIDC settings."""
        return get_oidc_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy domain settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings."""
    return OIDCSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy domain settings."""
    return TenancySettings()
