# backend/app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///backend/data/app.db"
    APP_ENV: str = "dev"  # dev | test | prod
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    # Comma separated; "*" allows any origin
    CORS_ALLOW_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allow_origins(self) -> list[str]:
        return [
            o.strip().strip('"').strip("'")
            for o in self.CORS_ALLOW_ORIGINS.split(",")
            if o.strip().strip('"').strip("'")
        ]


settings = Settings()
