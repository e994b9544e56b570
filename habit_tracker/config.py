"""
Runtime configuration read from the environment.

A `.env` file in the working directory is loaded first, so local
development can keep its connection string out of the shell profile.
"""

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_MONGO_URI = "mongodb://127.0.0.1:27017/habit_tracker"
DEFAULT_DB_NAME = "habit_tracker"


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = DEFAULT_MONGO_URI
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"

    @property
    def db_name(self) -> str:
        """Database named in the URI path, or the default when the path is empty."""
        path = urlparse(self.mongo_uri).path.lstrip("/")
        return path or DEFAULT_DB_NAME


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    return Settings(
        mongo_uri=os.getenv("MONGO_URI") or DEFAULT_MONGO_URI,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "4000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
