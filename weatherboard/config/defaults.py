"""Default upstream endpoints and runtime settings."""

OWM_BASE_URL = "https://api.openweathermap.org/data/2.5"
OWM_GEO_BASE_URL = "https://api.openweathermap.org/geo/1.0"
OWM_ICON_BASE_URL = "https://openweathermap.org/img/wn"

API_KEY_ENV_VAR = "OPENWEATHER_API_KEY"

DEFAULT_REFRESH_INTERVAL_SECONDS = 300  # 5 minutes
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_DB_PATH = "data/weatherboard.db"

SEARCH_MIN_QUERY_LENGTH = 3
SEARCH_MAX_SUGGESTIONS = 5
FORECAST_MAX_DAYS = 5
