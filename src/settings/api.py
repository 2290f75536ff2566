"""Read API settings: server binding, listing pages and CORS."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """Catalog read API configuration.

    Attributes:
        page_size: Films per listing page, fixed for every request.
    """

    host: str = Field(default="127.0.0.1", alias="API_HOST")
    port: int = Field(default=8000, ge=1, le=65535, alias="API_PORT")
    reload: bool = Field(default=False, alias="API_RELOAD")
    title: str = Field(default="MUBI Catalog API", alias="API_TITLE")
    version: str = Field(default="1.0.0", alias="API_VERSION")
    page_size: int = Field(default=20, ge=1, le=100, alias="API_PAGE_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class CORSSettings(BaseSettings):
    """Browser origins allowed to call the read API.

    Attributes:
        allowed_origins: Comma-separated origins, ``*`` for any.
    """

    allowed_origins: str = Field(default="*", alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def origins(self) -> list[str]:
        """Allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
