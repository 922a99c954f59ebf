"""Shared fixtures for the migration tests."""

import json

import pytest
import requests

from config import Config

ENV_VARS = (
    "BIGCOMMERCE_STORE_HASH",
    "BIGCOMMERCE_ACCESS_TOKEN",
    "BIGCOMMERCE_CHANNEL_ID",
    "BIGCOMMERCE_API_ORIGIN",
    "BIGCOMMERCE_SOURCE_TREE_ID",
    "BIGCOMMERCE_SOURCE_CHANNEL_ID",
    "BIGCOMMERCE_TREE_NAME",
    "BATCH_SIZE",
    "PAGE_LIMIT",
    "MAX_RETRIES",
    "LOG_LEVEL",
    "DRY_RUN",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test in a scratch directory with no BigCommerce settings."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def valid_env():
    return {
        "BIGCOMMERCE_STORE_HASH": "abc123",
        "BIGCOMMERCE_ACCESS_TOKEN": "secret-token",
        "BIGCOMMERCE_CHANNEL_ID": "5",
    }


@pytest.fixture
def config():
    return Config("abc123", "secret-token", 5, api_origin="https://api.example.com")


def make_response(status_code=200, json_data=None, headers=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(json_data).encode() if json_data is not None else b""
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    response.url = "https://api.example.com/stores/abc123"
    return response
