from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    GATEWAY_SECRET: str  # shared with the auth gateway that sets X-User-Id

    CLIENT_URL: str = "http://localhost:3000"  # origin used in share URLs
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    ACTIVITY_HISTORY_LIMIT: int = 100
    DEFAULT_ACTIVITY_PAGE_SIZE: int = 20

    # Client sync layer
    API_BASE_URL: str = "http://localhost:8000/api"
    CLIENT_TIMEOUT: float = 10.0

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
