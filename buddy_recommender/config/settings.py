import os
from pathlib import Path
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"


def _int_from_env(name: str, default: int, *, minimum: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}.")
    return value


# If MongoDB is missing it shall not start the application
class Settings:
    # Read MONGO_URI, DATABASE_NAME and the collection names from environment.
    def __init__(self):
        # Load .env in __init__ to ensure it works in Uvicorn's child processes
        if ENV_PATH.exists():
            load_dotenv(dotenv_path=ENV_PATH, override=True)

        self.MONGO_URI = os.environ.get("MONGO_URI", "").strip()
        if not self.MONGO_URI:
            raise ValueError("MONGO_URI environment variable is not set.")

        self.DATABASE_NAME = os.environ.get("DATABASE_NAME", "").strip()
        if not self.DATABASE_NAME:
            raise ValueError("DATABASE_NAME environment variable is not set.")

        self.USERS_COLLECTION = os.environ.get("USERS_COLLECTION", "users").strip()
        self.FRIEND_REQUESTS_COLLECTION = os.environ.get("FRIEND_REQUESTS_COLLECTION", "friendrequests").strip()

        if not all([self.USERS_COLLECTION, self.FRIEND_REQUESTS_COLLECTION]):
            raise ValueError("One or more required collection names are empty.")

        # Object storage for profile images. A missing bucket only fails image resolution.
        self.S3_BUCKET = os.environ.get("S3_BUCKET", "").strip()
        self.AWS_REGION = os.environ.get("AWS_REGION", "us-east-1").strip()
        self.SIGNED_URL_EXPIRES_SECONDS = _int_from_env("SIGNED_URL_EXPIRES_SECONDS", 60 * 60, minimum=1)

        self.MAX_RECOMMENDATIONS = _int_from_env("MAX_RECOMMENDATIONS", 20, minimum=1)
        self.MIN_RECOMMENDATIONS = _int_from_env("MIN_RECOMMENDATIONS", 5, minimum=0)
        if self.MIN_RECOMMENDATIONS > self.MAX_RECOMMENDATIONS:
            raise ValueError("MIN_RECOMMENDATIONS cannot exceed MAX_RECOMMENDATIONS.")
        self.FALLBACK_RECOMMENDATIONS = _int_from_env("FALLBACK_RECOMMENDATIONS", 6, minimum=1)

        # 0 means score every eligible user
        self.CANDIDATE_POOL_LIMIT = _int_from_env("CANDIDATE_POOL_LIMIT", 0, minimum=0)

        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
