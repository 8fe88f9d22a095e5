from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    secret_key: str
    database_url: str = "sqlite:///./portal.db"
    backend_cors_origins: str = "http://localhost:3000"
    sql_echo: bool = False
    log_level: str = "INFO"
    access_token_minutes: int = 60

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.backend_cors_origins.split(",") if origin.strip()]
