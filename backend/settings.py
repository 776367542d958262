import os
from pathlib import Path

# Basic settings helper to read environment configuration.

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "app.db"


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_list(val: str | None, default: list[str]) -> list[str]:
    if val is None:
        return list(default)
    return [v.strip() for v in val.split(",") if v.strip()]


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")

        self.GOOGLE_PLACES_API_KEY: str | None = os.getenv("GOOGLE_PLACES_API_KEY")
        self.GOOGLE_PLACES_BASE_URL: str = os.getenv(
            "GOOGLE_PLACES_BASE_URL", "https://places.googleapis.com/v1"
        )
        self.PLACES_LANGUAGE_CODE: str | None = os.getenv("PLACES_LANGUAGE_CODE")

        # Category bias appended to text searches that don't already mention it.
        self.PLACES_QUERY_HINT: str = os.getenv("PLACES_QUERY_HINT", "cafe")
        self.PLACES_QUERY_HINT_EQUIVALENTS: list[str] = _as_list(
            os.getenv("PLACES_QUERY_HINT_EQUIVALENTS"), ["cafe", "咖啡"]
        )

        self.PLACES_HTTP_TIMEOUT: float = float(os.getenv("PLACES_HTTP_TIMEOUT", "5.0"))
        self.PLACES_HTTP_MAX_ATTEMPTS: int = int(os.getenv("PLACES_HTTP_MAX_ATTEMPTS", "3"))
        self.PLACES_HTTP_BACKOFF: float = float(os.getenv("PLACES_HTTP_BACKOFF", "0.5"))

        self.LINK_MAX_REDIRECTS: int = int(os.getenv("LINK_MAX_REDIRECTS", "5"))
        self.LINK_AUTO_CREATE_CAFE: bool = _as_bool(os.getenv("LINK_AUTO_CREATE_CAFE"), False)


settings = Settings()
