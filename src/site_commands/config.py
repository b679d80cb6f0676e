"""Process-wide settings, read from the environment (and ``.env``)."""

from enum import StrEnum
from functools import lru_cache

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Settings for the command host and its site registry.

    The registry lives in PostgreSQL by default, addressed by the same
    POSTGRES_* variables the official Docker image uses. Setting
    DATABASE_URL_OVERRIDE (for example ``sqlite:///sites.db``) replaces
    the assembled URL entirely.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # True only in the process hosting the commands; importing command
    # modules anywhere else must not register them.
    cli_mode: bool = False
    all_sites_flag: str = "all-sites"
    command_modules: list[str] = ["site_commands.commands.hello"]

    postgres_user: str = "site_commands"
    postgres_password: SecretStr = SecretStr("secret")
    postgres_db: str = "site_commands"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    database_url_override: str | None = None

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("all_sites_flag")
    @classmethod
    def _bare_flag_name(cls, value: str) -> str:
        """Accept ``all-sites`` or ``--all-sites``; store the bare name."""
        name = value.strip().lstrip("-")
        if not name or any(ch.isspace() or ch == "=" for ch in name):
            raise ValueError(f"Invalid flag name: {value!r}")
        return name

    @computed_field(repr=False)  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        password = self.postgres_password.get_secret_value()
        return (
            f"postgresql+psycopg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are read once per process; tests build their own."""
    return Settings()


settings = get_settings()
