from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Relay board connection
    # "simulated" keeps everything in memory (local dev without hardware)
    ACTUATOR_BACKEND: Literal["http", "simulated"] = "http"
    ACTUATOR_BASE_URL: str = "http://192.168.4.1"
    ACTUATOR_TIMEOUT_SECONDS: float = 5.0
    # JSON file with names, pump/valve type and enabled flag per output
    # ({"in1": {"name": "Main pump", "type": "pump"}, ...}); defaults when unset
    RELAY_CONFIG_FILE: Optional[str] = None

    # Storage for programs and the action log
    STORAGE_BACKEND: Literal["sql", "memory"] = "sql"
    DATABASE_URL: str = "sqlite:///./relay_sequencer.db"
    ACTION_LOG_MAX_ENTRIES: int = 100

    # Engine
    TICK_INTERVAL_SECONDS: float = 1.0

    LOG_LEVEL: str = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
