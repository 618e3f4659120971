import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("APP_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _setting(key, default):
    """Environment variable wins over env.yaml, env.yaml over the default."""
    raw = os.environ.get(key)
    if raw is None:
        return data.get(key, default)
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, list):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


class ApplicationConfig:
    ENVIRONMENT = _setting("ENVIRONMENT", "development")
    DB_URI = _setting("DB_URI", "sqlite+aiosqlite:///./legalsaas.db")
    API_PREFIX = _setting("API_PREFIX", "/api")
    API_PORT = _setting("API_PORT", 8000)
    API_HOST = _setting("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _setting("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = bool(_setting("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = _setting("LOG_LEVEL", "INFO")

    JWT_ACCESS_SECRET = _setting("JWT_ACCESS_SECRET", "dev-secret-change-in-production")
    JWT_REFRESH_SECRET = _setting(
        "JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production"
    )
    JWT_ISSUER = _setting("JWT_ISSUER", "legalsaas")
    JWT_AUDIENCE = _setting("JWT_AUDIENCE", "legalsaas-users")
    JWT_ACCESS_EXPIRES_MINUTES = _setting("JWT_ACCESS_EXPIRES_MINUTES", 24 * 60)
    JWT_REFRESH_EXPIRES_DAYS = _setting("JWT_REFRESH_EXPIRES_DAYS", 7)

    STORAGE_TIMEOUT_SECONDS = _setting("STORAGE_TIMEOUT_SECONDS", 10.0)
