"""Engine configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class EngineConfig(BaseSettings):
    """Extraction engine configuration.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Diagnostic collaborator (OpenAI-compatible chat completions endpoint)
    huggingface_api_token: str = Field(
        default="",
        description="Token for the diagnostic service; empty disables the call",
    )
    diagnostic_enabled: bool = Field(
        default=True,
        description="Ask the diagnostic service for commentary after extraction",
    )
    diagnostic_api_url: str = Field(
        default="https://router.huggingface.co/v1/chat/completions",
        description="Chat completions endpoint used for diagnostics",
    )
    diagnostic_model: str = Field(
        default="Qwen/Qwen2.5-7B-Instruct",
        description="Model name sent to the diagnostic endpoint",
    )
    diagnostic_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for the whole diagnostic call",
    )
    diagnostic_sample_cells: int = Field(
        default=35,
        description="Number of non-empty cells sampled from the first sheet",
    )

    # Engine
    max_workers: int = Field(
        default=1,
        description="Thread pool size for sheet x strategy scans (1 = sequential)",
    )

    # Run archive
    db_path: str = Field(
        default="timetable.sqlite",
        description="SQLite file used by the CLI --db option when no path is given",
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
_config: EngineConfig | None = None


def get_config() -> EngineConfig:
    """Get the engine configuration singleton.

    Returns:
        EngineConfig: Engine configuration instance
    """
    global _config
    if _config is None:
        _config = EngineConfig()
    return _config
