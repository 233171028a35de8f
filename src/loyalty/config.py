from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    debug: bool = False
    inactivity_timeout: float = 60 * 60  # Seconds without user activity before the session is closed
    search_debounce: float = 0.4  # Quiet period in seconds before typed search text is committed
    page_size: int = 10  # Customers per table page
    bcrypt_rounds: int = 10  # Cost factor for admin password hashes

    model_config = {
        "env_file": [".env"],
        "env_prefix": "LOYALTY_",
        "extra": "ignore",
    }
