import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "http://localhost:8900"


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    api_timeout: float = 30.0
    log_level: str = "INFO"
    max_sessions: int = 256


def load_settings() -> Settings:
    """
    Reads service settings from the environment (.env is loaded on import).
    CALC_API_URL is the only setting the board itself depends on.
    """
    api_url = os.environ.get("CALC_API_URL", DEFAULT_API_URL).strip() or DEFAULT_API_URL
    return Settings(
        api_url=api_url.rstrip("/"),
        api_timeout=float(os.environ.get("CALC_API_TIMEOUT", "30")),
        log_level=os.environ.get("SKETCHCALC_LOG_LEVEL", "INFO").upper(),
        max_sessions=max(1, int(os.environ.get("SKETCHCALC_MAX_SESSIONS", "256"))),
    )
