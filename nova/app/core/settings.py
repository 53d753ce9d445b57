import os


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


class Settings:
    def __init__(self):
        self.app_name = "Nova Tutoring"
        self.api_version = "1.0.0"
        self.environment = os.getenv("NOVA_ENVIRONMENT", "development")
        self.secret_key = os.getenv("NOVA_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.jwt_algorithm = os.getenv("NOVA_JWT_ALGORITHM", "HS256")
        self.access_token_expire_minutes = _env_int("NOVA_ACCESS_TOKEN_EXPIRE_MINUTES", 30)
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("NOVA_DATABASE_URL", "sqlite:///./nova.db")
        self.log_level = os.getenv("NOVA_LOG_LEVEL", "INFO")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("NOVA_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if origin.strip()
        ]

        # Student capacity & parent access policy
        self.student_active_limit = _env_int("NOVA_STUDENT_ACTIVE_LIMIT", 20)
        self.parent_link_token_bytes = _env_int("NOVA_PARENT_LINK_TOKEN_BYTES", 24)
        # None keeps parent links valid indefinitely
        self.parent_link_token_ttl_days = _env_int("NOVA_PARENT_LINK_TOKEN_TTL_DAYS", None)

        self.store_retry_attempts = _env_int("NOVA_STORE_RETRY_ATTEMPTS", 3)
        self.store_retry_base_delay = float(os.getenv("NOVA_STORE_RETRY_BASE_DELAY", "0.2"))


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
