import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./documents.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Issuance
    REQUIRE_VERIFIED_EMAIL = bool(data.get("REQUIRE_VERIFIED_EMAIL", True))
    DEFAULT_JURISDICTION = data.get("DEFAULT_JURISDICTION", "NG")
    DOCUMENT_NUMBER_PADDING = data.get("DOCUMENT_NUMBER_PADDING", 6)

    # Public verification portal, used in rendered documents
    VERIFICATION_BASE_URL = data.get("VERIFICATION_BASE_URL", "https://verify.example.com")

    # Retention
    DEFAULT_RETENTION_YEARS = data.get("DEFAULT_RETENTION_YEARS", 7)
    RETENTION_ENABLED = bool(data.get("RETENTION_ENABLED", True))
    RETENTION_INTERVAL_SECONDS = data.get("RETENTION_INTERVAL_SECONDS", 604800)  # Weekly
    RETENTION_SERVICE_TOKEN = data.get("RETENTION_SERVICE_TOKEN", "")
    RETENTION_NOTIFICATION_WEBHOOK = data.get("RETENTION_NOTIFICATION_WEBHOOK", None)
