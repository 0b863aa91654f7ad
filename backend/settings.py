import os

# Basic settings helper to read environment configuration.


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.REPORT_SERVICE_URL: str = os.getenv(
            "REPORT_SERVICE_URL", "http://localhost:8000/sustainability-result"
        )
        self.REPORT_TIMEOUT_SECONDS: float = _as_float(os.getenv("REPORT_TIMEOUT_SECONDS"), 240.0)

        self.NOMINATIM_BASE_URL: str = os.getenv(
            "NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org"
        ).rstrip("/")
        self.NOMINATIM_USER_AGENT: str = os.getenv("NOMINATIM_USER_AGENT") or "ZerraSustainabilityAnalysis"
        self.NOMINATIM_REFERER: str | None = os.getenv("NOMINATIM_REFERER")
        self.NOMINATIM_MIN_INTERVAL: float = _as_float(os.getenv("NOMINATIM_MIN_INTERVAL"), 1.0)
        self.NOMINATIM_TIMEOUT_SECONDS: float = _as_float(os.getenv("NOMINATIM_TIMEOUT_SECONDS"), 5.0)

        self.SEARCH_DEBOUNCE_SECONDS: float = _as_float(os.getenv("SEARCH_DEBOUNCE_SECONDS"), 0.3)
        self.SEARCH_MIN_QUERY_LENGTH: int = _as_int(os.getenv("SEARCH_MIN_QUERY_LENGTH"), 2)
        self.SEARCH_RESULT_LIMIT: int = _as_int(os.getenv("SEARCH_RESULT_LIMIT"), 10)
        self.REVERSE_GEOCODE_ZOOM: int = _as_int(os.getenv("REVERSE_GEOCODE_ZOOM"), 14)

        # Bengaluru
        self.DEFAULT_MAP_LAT: float = _as_float(os.getenv("DEFAULT_MAP_LAT"), 12.971599)
        self.DEFAULT_MAP_LON: float = _as_float(os.getenv("DEFAULT_MAP_LON"), 77.594566)
        self.DEFAULT_MAP_ZOOM: int = _as_int(os.getenv("DEFAULT_MAP_ZOOM"), 13)

        self.MAX_OPEN_RESULTS: int = _as_int(os.getenv("MAX_OPEN_RESULTS"), 200)


settings = Settings()
