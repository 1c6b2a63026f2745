from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./vital.db"
    ENVIRONMENT: str = "local"

    # IANA zone name used for day boundaries; empty means the host's local zone
    LOCAL_TIMEZONE: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_ENABLED: bool = True
    LOG_FILE_ENABLED: bool = False
    LOG_FILE_PATH: str = "./logs/vital.log"
    LOG_JSON_FORMAT: bool = True

    # Companion chat
    COMPANION_REPLY_DELAY_SECONDS: float = 1.5
    DEFAULT_INSIGHT_LIMIT: int = 10
    DEFAULT_CHAT_HISTORY_LIMIT: int = 50

    # Fill an empty database with preview data on startup
    SEED_PREVIEW_DATA: bool = False


settings = Settings()
