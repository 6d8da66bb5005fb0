import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[1]
STATIC_DIR = Path(os.getenv("STATIC_DIR") or BASE_DIR / "public")

CONVERSATION_URL = os.getenv("CONVERSATION_URL", "https://gateway.watsonplatform.net/conversation/api")
CONVERSATION_USERNAME = os.getenv("CONVERSATION_USERNAME", "<username>")
CONVERSATION_PASSWORD = os.getenv("CONVERSATION_PASSWORD", "<password>")
CONVERSATION_VERSION_DATE = os.getenv("CONVERSATION_VERSION_DATE", "2016-07-11")
WORKSPACE_PLACEHOLDER = "<workspace-id>"

OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY") or os.getenv("WEATHER_API_KEY")
OPENWEATHER_GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
OPENWEATHER_API_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
OPENWEATHER_DAILY_URL = "https://api.openweathermap.org/data/2.5/forecast/daily"
WEATHER_UNITS = os.getenv("WEATHER_UNITS", "imperial")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


REQUEST_TIMEOUT_SECONDS = _env_float("REQUEST_TIMEOUT_SECONDS", 10.0)

# DEBUG covers the request flow, DEBUG_UTIL the weather provider.
DEBUG = _env_flag("DEBUG", False)
DEBUG_UTIL = _env_flag("DEBUG_UTIL", False)


def workspace_id() -> str:
    """Resolved on every call, not at import."""
    return os.getenv("WORKSPACE_ID") or WORKSPACE_PLACEHOLDER


def configure_logging(debug: bool = DEBUG, debug_util: bool = DEBUG_UTIL) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("weather_bridge.api").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("weather_bridge.weather").setLevel(logging.DEBUG if debug_util else logging.WARNING)
