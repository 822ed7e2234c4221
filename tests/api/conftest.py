"""Shared fixtures for dashboard API tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tiktok_orders.api.main import create_app
from tiktok_orders.infrastructure.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the local environment."""
    return Settings(_env_file=None, display_timezone="UTC", page_size=10)


@pytest.fixture
def app(test_settings, mock_api_client) -> FastAPI:
    """Dashboard app over the mock backend client."""
    return create_app(test_settings, api_client=mock_api_client)


@pytest.fixture
def client(app):
    """Test client with the startup fetch already done."""
    with TestClient(app) as client:
        yield client
