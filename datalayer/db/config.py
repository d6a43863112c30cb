"""Database configuration."""

from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # SQL Server connection settings
    mssql_user: str = "sa"
    mssql_password: str = ""
    mssql_host: str = "localhost"
    mssql_port: int = 1433
    mssql_db: str = "master"
    mssql_odbc_driver: str = "ODBC Driver 18 for SQL Server"

    # Full SQLAlchemy URL; overrides the parts above when set
    database_url: Optional[str] = None
    async_database_url: Optional[str] = None

    schema_name: Optional[str] = "dbo"
    sql_echo: bool = False
    transaction_isolation_level: str = "READ COMMITTED"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
    )

    def _mssql_url(self, dialect: str) -> str:
        return (
            f"mssql+{dialect}://{quote_plus(self.mssql_user)}:"
            f"{quote_plus(self.mssql_password)}"
            f"@{self.mssql_host}:{self.mssql_port}/{self.mssql_db}"
            f"?driver={quote_plus(self.mssql_odbc_driver)}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Construct the synchronous database URL."""
        return self.database_url or self._mssql_url("pyodbc")

    @property
    def async_sqlalchemy_url(self) -> str:
        """Construct the asynchronous database URL."""
        return self.async_database_url or self._mssql_url("aioodbc")


# Global settings instance
settings = Settings()
