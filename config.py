import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()

MIN_SECRET_LENGTH = 32


class ConfigError(Exception):
    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./session_vault.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    JWT_ACCESS_SECRET = data.get(
        "JWT_ACCESS_SECRET", "dev-access-secret-change-in-production-0001"
    )
    JWT_REFRESH_SECRET = data.get(
        "JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production-0002"
    )
    JWT_ACCESS_EXPIRY = data.get("JWT_ACCESS_EXPIRY", "10m")
    JWT_REFRESH_EXPIRY = data.get("JWT_REFRESH_EXPIRY", "7d")
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 10))
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", 1))


def validate_config(config) -> None:
    """
    Fail fast on unsafe signing configuration.

    Raises:
        ConfigError: listing every problem found
    """
    problems = []
    access_secret = getattr(config, "JWT_ACCESS_SECRET", None)
    refresh_secret = getattr(config, "JWT_REFRESH_SECRET", None)

    for name, value in (
        ("JWT_ACCESS_SECRET", access_secret),
        ("JWT_REFRESH_SECRET", refresh_secret),
    ):
        if not value:
            problems.append(f"{name} is required")
        elif len(value) < MIN_SECRET_LENGTH:
            problems.append(f"{name} must be at least {MIN_SECRET_LENGTH} characters")

    if access_secret and access_secret == refresh_secret:
        problems.append("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")

    if problems:
        raise ConfigError(problems)
