"""Client configuration loaded from environment variables.

The parsing core needs no configuration; these settings only drive the HTTP
client and the command-line script.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SuplConfig(BaseSettings):
    """Configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Bulletin endpoint (must contain "jecnarozvrh", checked by the client)
    supl_endpoint_url: str = Field(
        default="",
        description="URL of the jecnarozvrh substitution JSON endpoint",
    )
    supl_class_symbol: str = Field(
        default="",
        description="Class symbol to show substitutions for, e.g. C2b",
    )

    # HTTP
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single GET of the bulletin",
    )
    fetch_attempts: int = Field(
        default=3,
        description="Attempts per fetch when the failure is transient",
    )
    retry_wait_seconds: float = Field(
        default=2.0,
        description="Pause between fetch attempts",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: SuplConfig | None = None


def get_config() -> SuplConfig:
    """Get the configuration singleton.

    Returns:
        SuplConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = SuplConfig()
    return _config
