"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat client. Values come from the
environment (or a .env file) and fall back to local-development defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_MAX_ATTACHMENT_SIZE = 25 * 1024 * 1024  # 25MB


def _default_config_dir() -> Path:
    configured = os.getenv("WINDCHAT_CONFIG_DIR")
    if configured:
        return Path(configured)
    return Path.home() / ".config" / "windchat"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Configuration for the chat client.

    Attributes:
        api_base_url: Base URL of the chat backend REST API.
        config_dir: Directory holding the persisted credentials file.
        request_timeout: Per-request timeout in seconds.
        use_mock_data: Seed conversations from the bundled demo data.
        max_attachment_size: Largest file accepted by the attachment stager.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("WINDCHAT_API_URL", DEFAULT_API_URL),
        description="Chat backend base URL",
    )
    config_dir: Path = Field(
        default_factory=_default_config_dir,
        description="Directory for persisted credentials",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("WINDCHAT_TIMEOUT", "15")),
        gt=0.0,
        le=120.0,
        description="HTTP request timeout in seconds",
    )
    use_mock_data: bool = Field(
        default_factory=lambda: _env_flag("WINDCHAT_MOCK_DATA", True),
        description="Use demo conversations instead of the rooms endpoint",
    )
    max_attachment_size: int = Field(
        default=DEFAULT_MAX_ATTACHMENT_SIZE,
        ge=1,
        description="Maximum size of a staged attachment in bytes",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("WINDCHAT_API_URL must start with http:// or https://")
        return v.rstrip("/")


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If an environment value is invalid.
    """
    return ClientConfig()
