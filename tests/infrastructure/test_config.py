"""Tests for Settings configuration."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tiktok_orders.infrastructure.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_default_settings(self):
        """Test default settings values."""
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.order_api_url == "http://localhost:8000"
            assert settings.order_list_path == "/api-order"
            assert settings.order_sync_path == "/sync-order-id"
            assert settings.request_timeout == 30.0
            assert settings.page_size == 10
            assert settings.display_timezone == "Asia/Jakarta"
            assert settings.log_level == "INFO"

    def test_settings_from_env(self):
        """Test settings from environment variables."""
        env_vars = {
            "ORDER_API_URL": "https://orders.example.com",
            "ORDER_LIST_PATH": "/v2/orders",
            "REQUEST_TIMEOUT": "5",
            "PAGE_SIZE": "25",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict("os.environ", env_vars, clear=False):
            settings = Settings(_env_file=None)
            assert settings.order_api_url == "https://orders.example.com"
            assert settings.order_list_path == "/v2/orders"
            assert settings.request_timeout == 5.0
            assert settings.page_size == 25
            assert settings.log_level == "DEBUG"

    def test_invalid_page_size_rejected(self):
        with patch.dict("os.environ", {"PAGE_SIZE": "0"}, clear=False):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)
