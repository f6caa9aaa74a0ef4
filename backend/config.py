from datetime import timedelta
from typing import List
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "supersecretkey"


class Settings(BaseModel):
    """Настройки процесса. Собираются один раз при старте и передаются в create_app."""

    database_url: str = "sqlite:///./tasks.db"
    secret_key: str = DEV_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire: timedelta = timedelta(days=7)
    bcrypt_rounds: int = 10
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()  # Загружаем переменные из .env файла

        secret_key = os.getenv("JWT_SECRET")
        if not secret_key:
            logger.warning("JWT_SECRET не задан, используется ключ для разработки")
            secret_key = DEV_SECRET_KEY

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            database_url=_database_url(),
            secret_key=secret_key,
            access_token_expire=timedelta(days=int(os.getenv("JWT_EXPIRE_DAYS", "7"))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Старый способ: URL Postgres собирается из отдельных переменных
    host = os.getenv("POSTGRES_HOST")
    if host:
        port = os.getenv("POSTGRES_PORT", "5432")
        name = os.getenv("POSTGRES_DB")
        user = os.getenv("POSTGRES_USER")
        password = os.getenv("POSTGRES_PASSWORD")
        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"

    return "sqlite:///./tasks.db"
