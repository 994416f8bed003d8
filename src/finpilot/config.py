from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 4000
    debug: bool = False
    cors_origins: list[str] = []
    session_cookie_secure: bool = False  # Enable in production behind HTTPS
    session_idle_timeout_seconds: int = 60 * 60
    timezone: str = "Asia/Seoul"  # Used for day buckets in expense summaries and default ranges
    llm_model: str = "gpt-4o-mini"
    llm_api_key: str = ""
    llm_temperature: float = 0.5

    model_config = {
        "env_file": [".env"],
        "env_prefix": "FINPILOT_",
        "extra": "ignore",
    }
