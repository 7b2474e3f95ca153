from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Needed for admin-side profile writes
    profiles_table: str = "users"

    # Profiles
    default_weekly_goal: int = 20000

    # Rankings
    global_leaderboard_size: int = 10
    global_leaderboard_fetch_limit: int = 100

    # Friends
    friend_code_max_attempts: int = 5

    # Steps
    week_start_day: int = 0  # 0 = Monday ... 6 = Sunday

    # Auth
    auth_cache_ttl_seconds: int = 60
    auth_cache_max_size: int = 500

    # App
    app_name: str = "stepquest-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
