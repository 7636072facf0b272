from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://postgres:postgres@db:5432/brewlog"

    log_level: str = "INFO"

    # Gap detection: |current - target| <= tolerance counts as on target
    gap_tolerance: float = 0.0

    # Gap backlog scans this many recent experiments before filtering/paginating
    gap_backlog_scan_limit: int = 500
    default_page_size: int = 20
    max_page_size: int = 100

    # Auth settings
    session_cookie_name: str = "brewlog_session"
    session_max_age: int = 86400 * 7  # 7 days
    session_cookie_secure: bool = False  # True in production

    class Config:
        env_file = ".env"


settings = Settings()
