import os

# In a real deployment, load from environment variables or a .env file
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./user_analytics.sqlite3")
GENERATE_SCHEMAS: bool = os.getenv("GENERATE_SCHEMAS", "True").lower() in ("true", "1", "t")

MODEL_MODULES: list[str] = [
    "user_analytics.features.auth.models",
    "user_analytics.features.generations.models",
]

TORTOISE_ORM_CONFIG = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {  # This is an app label, can be anything
            "models": MODEL_MODULES,
            "default_connection": "default",
        }
    },
}

SECRET_KEY: str = os.getenv(
    "SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!"
)
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Analytics report tuning
DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "200"))
RECENT_GENERATIONS_LIMIT: int = int(os.getenv("RECENT_GENERATIONS_LIMIT", "20"))
RECENT_LOGINS_LIMIT: int = int(os.getenv("RECENT_LOGINS_LIMIT", "30"))

# Returned to clients for any unexpected report failure
INTERNAL_ERROR_MESSAGE: str = os.getenv("INTERNAL_ERROR_MESSAGE", "服务器内部错误")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Comma separated logger namespaces, e.g. "user_analytics.features.analytics"
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]
