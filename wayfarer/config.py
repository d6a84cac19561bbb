"""Application configuration using environment variables."""
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Simulation
    DEFAULT_SEED: int = int(os.getenv("DEFAULT_SEED", "12345"))

    # Ship defaults used when a session does not specify its own
    SHIP_SPEED: int = int(os.getenv("SHIP_SPEED", "100"))  # distance units per day
    SHIP_EFFICIENCY: float = float(os.getenv("SHIP_EFFICIENCY", "1.0"))
    SAFETY_WEIGHT: float = float(os.getenv("SAFETY_WEIGHT", "1.0"))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
