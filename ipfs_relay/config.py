import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PIN_URL = "https://api.pinata.cloud/pinning/pinFileToIPFS"
DEFAULT_GATEWAY_URL = "https://ipfs.io/ipfs"


class ConfigError(Exception):
    """Raised when startup configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    pinata_api_key: str = ""
    pinata_secret_api_key: str = ""
    pinata_pin_url: str = DEFAULT_PIN_URL
    ipfs_gateway_url: str = DEFAULT_GATEWAY_URL
    pinata_timeout_s: float | None = None
    relay_host: str = "0.0.0.0"
    relay_port: int = 3000
    relay_url: str = "http://localhost:3000"
    upload_timeout_s: float | None = None
    startup_timeout_s: float = 5.0
    log_level: str = "INFO"
    log_json: bool = True
    enable_metrics: bool = True

    @classmethod
    def from_env(cls, env_file: str | None = ".env", require_secrets: bool = True) -> "Settings":
        if env_file:
            load_dotenv(env_file)

        relay_port = _int("RELAY_PORT", 3000)
        startup_timeout_s = _optional_timeout("STARTUP_TIMEOUT_S")
        settings = cls(
            pinata_api_key=os.getenv("PINATA_API_KEY", "").strip(),
            pinata_secret_api_key=os.getenv("PINATA_SECRET_API_KEY", "").strip(),
            pinata_pin_url=os.getenv("PINATA_PIN_URL", DEFAULT_PIN_URL),
            ipfs_gateway_url=os.getenv("IPFS_GATEWAY_URL", DEFAULT_GATEWAY_URL),
            pinata_timeout_s=_optional_timeout("PINATA_TIMEOUT_S"),
            relay_host=os.getenv("RELAY_HOST", "0.0.0.0"),
            relay_port=relay_port,
            relay_url=(os.getenv("RELAY_URL", "").strip() or f"http://localhost:{relay_port}").rstrip("/"),
            upload_timeout_s=_optional_timeout("UPLOAD_TIMEOUT_S"),
            startup_timeout_s=5.0 if startup_timeout_s is None else startup_timeout_s,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "true").lower() == "true",
            enable_metrics=os.getenv("ENABLE_METRICS", "true").lower() == "true",
        )
        if require_secrets:
            settings.check_secrets()
        return settings

    def check_secrets(self) -> None:
        missing = [
            name
            for name, value in (
                ("PINATA_API_KEY", self.pinata_api_key),
                ("PINATA_SECRET_API_KEY", self.pinata_secret_api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"missing required environment variables: {', '.join(missing)}")


def _optional_timeout(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero, got {raw!r}")
    return value


def _int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
