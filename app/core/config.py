from pydantic_settings import BaseSettings
from typing import List

from app.core.env_config import env_manager


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    ENVIRONMENT: str = "development"
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_URL: str = "http://localhost:8080"
    API_PREFIX: str = "/api"

    LOG_DIR: str = "logs"

    # Derived from FRONTEND_URL when left empty
    CORS_ORIGINS: List[str] = []

    class Config:
        env_file = ".env"

    def __init__(self, **kwargs):
        url_config = env_manager.get_url_config()

        for key, value in url_config.items():
            if key.upper() not in kwargs:
                kwargs[key.upper()] = value

        super().__init__(**kwargs)

        if not self.CORS_ORIGINS:
            self.CORS_ORIGINS = env_manager.get_cors_origins(self.FRONTEND_URL)

    def get_environment_config(self) -> dict:
        """Get environment-specific configuration as a dictionary"""
        return {
            "environment": self.ENVIRONMENT,
            "frontend_url": self.FRONTEND_URL,
            "backend_url": self.BACKEND_URL,
            "api_prefix": self.API_PREFIX,
            "cors_origins": self.CORS_ORIGINS,
            "loaded_config_files": env_manager.get_loaded_files(),
        }


settings = Settings()
