import httpx
import pytest
from fastapi.testclient import TestClient

from ipfs_relay.config import Settings
from ipfs_relay.main import create_app

CONFIG_ENV_VARS = (
    "PINATA_API_KEY",
    "PINATA_SECRET_API_KEY",
    "PINATA_PIN_URL",
    "IPFS_GATEWAY_URL",
    "PINATA_TIMEOUT_S",
    "RELAY_HOST",
    "RELAY_PORT",
    "RELAY_URL",
    "UPLOAD_TIMEOUT_S",
    "STARTUP_TIMEOUT_S",
    "LOG_LEVEL",
    "LOG_JSON",
    "ENABLE_METRICS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # Keep tests offline-safe and undo anything load_dotenv writes.
    for name in CONFIG_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def settings() -> Settings:
    return Settings(pinata_api_key="key", pinata_secret_api_key="secret", log_json=False)


@pytest.fixture
def relay_client(settings):
    def _make(handler, app_settings: Settings | None = None) -> TestClient:
        app = create_app(app_settings or settings, pinata_transport=httpx.MockTransport(handler))
        return TestClient(app)

    return _make
