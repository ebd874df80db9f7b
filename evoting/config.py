import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'evoting.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MIN", "480"))
    )

    # Admin gate: a single shared password. A werkzeug hash takes precedence.
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me")
    ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

    # Voter admission: False = token-registry mode, True = self-service identifiers
    ALLOW_SELF_SERVICE_VOTERS = _env_bool("ALLOW_SELF_SERVICE_VOTERS")

    # Candidates
    CANDIDATE_PHOTO_MAX_BYTES = int(os.getenv("CANDIDATE_PHOTO_MAX_BYTES", str(2 * 1024 * 1024)))
    CANDIDATE_PHOTO_TYPES = tuple(
        t.strip() for t in os.getenv("CANDIDATE_PHOTO_TYPES", "image/png,image/jpeg").split(",") if t.strip()
    )

    DEFAULT_VOTING_SESSION_ID = os.getenv("DEFAULT_VOTING_SESSION_ID", "default-session")

    SWAGGER = {"title": "E-Voting API", "uiversion": 3}
