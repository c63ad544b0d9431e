from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    # API
    HOST: str = "127.0.0.1"
    PORT: int = 3002

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"

    # Summary service
    WIKI_API_BASE: str = "https://en.wikipedia.org/api/rest_v1/page/summary/"
    WIKI_PAGE_BASE: str = "https://en.wikipedia.org/wiki/"
    SOURCE_NAME: str = "Wikipedia"
    USER_AGENT: str = "askwiki-service/0.1 (https://github.com/askwiki/askwiki-service)"
    FETCH_TIMEOUT: float = 5.0
    FALLBACK_TOPIC: str = "General-purpose_AI"
    FALLBACK_TOPIC_ENABLED: bool = False

    # Analysis
    KEY_POINTS_LIMIT: int = 5
    KEY_POINT_MIN_LENGTH: int = 20
    BEGINNER_MIN_HITS: int = 1
    ADVANCED_MIN_HITS: int = 2


settings = Settings()
