"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings shared by the dashboard and the MCP server."""

    # API
    api_version: str = "1.0.0"
    debug: bool = False

    # Order backend
    order_api_url: str = Field(
        default="http://localhost:8000",
        description="Order backend base URL",
    )
    order_list_path: str = Field(
        default="/api-order",
        description="Path of the order listing endpoint",
    )
    order_sync_path: str = Field(
        default="/sync-order-id",
        description="Path of the single order sync endpoint",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Backend request timeout in seconds",
    )

    # Dashboard
    dashboard_host: str = "0.0.0.0"
    dashboard_port: int = 8080
    page_size: int = Field(default=10, ge=1, le=100)
    display_timezone: str = "Asia/Jakarta"

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
