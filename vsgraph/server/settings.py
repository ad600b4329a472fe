from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load default .env and optional VSGRAPH_ENV_FILE override for local runs
load_dotenv()
env_file_override = os.getenv("VSGRAPH_ENV_FILE")
if env_file_override:
    load_dotenv(env_file_override, override=False)


class Settings:
    def __init__(self) -> None:
        self.HOST: str = os.getenv("VSGRAPH_HOST", "127.0.0.1")
        self.PORT: int = int(os.getenv("VSGRAPH_PORT", "3001"))
        self.LOG_LEVEL: str = os.getenv("VSGRAPH_LOG_LEVEL", "INFO").upper()

        # CORS
        cors_origins_csv = os.getenv("VSGRAPH_CORS_ORIGINS", "*")
        self.CORS_ORIGINS: List[str] = [o.strip() for o in cors_origins_csv.split(",") if o.strip()]


settings = Settings()
