from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://reflect:reflect@db:5432/interpret_reflect"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Salt mixed into user ids before hashing; scoring tables only ever see the hash.
    USER_HASH_SALT: str = "interpretreflect-zkwv-2025"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://app.interpretreflect.com,https://api.interpretreflect.com"
    CORS_ORIGINS: str = "*"

    # Users whose pattern state is kept in memory; least recently used are dropped first.
    PATTERN_STATE_MAX_USERS: int = 10_000

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
