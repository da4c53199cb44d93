import os
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.path.abspath(os.path.join(os.path.dirname(__file__), "../../.env")),
        extra="allow"
    )

    # secrets are checked per endpoint so a missing key only breaks the route that needs it
    OMDB_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    OMDB_API_URL: str = "https://www.omdbapi.com/"
    OMDB_POSTER_API_URL: str = "https://img.omdbapi.com/"
    OPENAI_API_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_LIVE_SEARCH_MODEL: str = "gpt-4.1"

    RATE_LIMIT_MAX_REQUESTS: int = 5
    RATE_LIMIT_WINDOW_SECONDS: float = 60
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS: int = 300

    MAX_DESCRIPTION_LENGTH: int = 2000
    MAX_RECOMMENDATIONS: int = 10
    DEFAULT_REGION: str = "Australia"

    HTTP_TIMEOUT_SECONDS: float = 30
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "movie-recommendations"

    @property
    def omdb_configured(self) -> bool:
        return bool(self.OMDB_API_KEY)

    @property
    def openai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)


settings = Settings()
