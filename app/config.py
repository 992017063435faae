from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    search_url: str = "https://openlibrary.org/search.json"
    covers_url: str = "https://covers.openlibrary.org/b/id"
    catalog_url: str = "https://openlibrary.org"
    archive_url: str = "https://archive.org/details"
    placeholder_cover_url: str = "/static/cover-placeholder.svg"

    page_size: int = 24
    # Open Library stops serving results past this index no matter how large
    # numFound is, so pages starting at or beyond it are never requested.
    max_result_index: int = 1000

    # Quiet window before a changed query hits the network.
    debounce_seconds: float = 0.3
    request_timeout: float = 10.0
    user_agent: str = "Book Finder (https://openlibrary.org/developers/api)"

    # Idle search sessions are dropped after this long.
    session_ttl_seconds: float = 1800.0
    max_sessions: int = 1000

    log_level: str = "INFO"


settings = Settings()
