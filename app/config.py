import os
import logging
from dotenv import load_dotenv

load_dotenv()

JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
ACCESS_TOKEN_EXPIRE_SECONDS = int(os.getenv("ACCESS_TOKEN_EXPIRE_SECONDS", str(60*60*24)))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///access_requests.db")
SEED_DEMO_USERS = os.getenv("SEED_DEMO_USERS", "false").lower() == "true"

# Whether Manager accounts may file access requests for themselves
MANAGER_CAN_REQUEST = os.getenv("MANAGER_CAN_REQUEST", "false").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

RECENT_DEFAULT_LIMIT = 5
RECENT_MAX_LIMIT = 50


def configure_logging(level: str | None = None) -> None:
    """Attach a single stream handler to the ``app`` logger tree."""
    root = logging.getLogger("app")
    root.setLevel(getattr(logging, (level or LOG_LEVEL), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root.addHandler(handler)
