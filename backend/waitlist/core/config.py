# waitlist/core/config.py
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv


def str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


class Settings:
    def __init__(self) -> None:
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            # Load .env only for non-prod so prod can't be accidentally influenced by local files.
            load_dotenv()

        # ----------------------------
        # Database
        # ----------------------------
        # DATABASE_URL wins when set (tests, local sqlite); otherwise build a Postgres URL.
        self.DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
        self.DB_HOST = os.getenv("DB_HOST", "localhost")
        self.DB_PORT = os.getenv("DB_PORT", "5432")
        self.DB_NAME = os.getenv("DB_NAME", "waitlist")
        self.DB_APP_USER = os.getenv("DB_APP_USER", "")
        self.DB_APP_PASSWORD = os.getenv("DB_APP_PASSWORD", "")
        self.DB_MIGRATOR_USER = os.getenv("DB_MIGRATOR_USER", "")
        self.DB_MIGRATOR_PASSWORD = os.getenv("DB_MIGRATOR_PASSWORD", "")
        self.DB_SSLMODE = os.getenv("DB_SSLMODE", "prefer").strip().lower()

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:3000",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # Sessions / passwords
        # ----------------------------
        self.JWT_SECRET = os.getenv("JWT_SECRET", "")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.SESSION_TOKEN_EXPIRE_MINUTES = int(os.getenv("SESSION_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
        self.PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "12"))

        # ----------------------------
        # OAuth providers
        # ----------------------------
        if self.ENV == "prod":
            self.FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "").strip().rstrip("/")
            self.PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").strip().rstrip("/")
        else:
            self.FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000").strip().rstrip("/")
            self.PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").strip().rstrip("/")

        self.GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
        self.GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
        self.GOOGLE_REDIRECT_URI = os.getenv(
            "GOOGLE_REDIRECT_URI", f"{self.PUBLIC_BASE_URL}/auth/google/callback"
        ).strip()

        self.GITHUB_CLIENT_ID = os.getenv("GITHUB_CLIENT_ID", "")
        self.GITHUB_CLIENT_SECRET = os.getenv("GITHUB_CLIENT_SECRET", "")
        self.GITHUB_REDIRECT_URI = os.getenv(
            "GITHUB_REDIRECT_URI", f"{self.PUBLIC_BASE_URL}/auth/github/callback"
        ).strip()

        self.OAUTH_STATE_TTL_SECONDS = int(os.getenv("OAUTH_STATE_TTL_SECONDS", "300"))
        self.OAUTH_STATE_COOKIE_NAME = os.getenv("OAUTH_STATE_COOKIE_NAME", "oauth_state_nonce")
        self.PROVIDER_HTTP_TIMEOUT = float(os.getenv("PROVIDER_HTTP_TIMEOUT", "10"))

        # Social login on an email that already has an account links the provider silently.
        # NOTE: needs security review; a provider that lets users claim unverified emails can hijack accounts.
        self.ALLOW_IMPLICIT_SOCIAL_LINKING = str_to_bool(
            os.getenv("ALLOW_IMPLICIT_SOCIAL_LINKING"), default=True
        )

        # ----------------------------
        # Rate limiting
        # ----------------------------
        self.ENABLE_RATE_LIMITING = str_to_bool(os.getenv("ENABLE_RATE_LIMITING", "false"))

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.JWT_SECRET:
            missing.append("JWT_SECRET")
        if not self.DATABASE_URL:
            if not self.DB_APP_USER:
                missing.append("DB_APP_USER")
            if not self.DB_APP_PASSWORD:
                missing.append("DB_APP_PASSWORD")

        if not self.FRONTEND_BASE_URL:
            missing.append("FRONTEND_BASE_URL")
        if not self.PUBLIC_BASE_URL:
            missing.append("PUBLIC_BASE_URL")

        if not self.CORS_ORIGINS:
            missing.append("CORS_ORIGINS")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if self.FRONTEND_BASE_URL and not self.FRONTEND_BASE_URL.startswith("https://"):
            raise RuntimeError("FRONTEND_BASE_URL should be https://... in prod")
        if self.PUBLIC_BASE_URL and not self.PUBLIC_BASE_URL.startswith("https://"):
            raise RuntimeError("PUBLIC_BASE_URL should be https://... in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    def _build_database_url(self, user: str, password: str) -> str:
        encoded_password = quote_plus(password)
        return (
            f"postgresql+psycopg2://{user}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSLMODE}"
        )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self._build_database_url(self.DB_APP_USER, self.DB_APP_PASSWORD)

    @property
    def migrations_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self._build_database_url(self.DB_MIGRATOR_USER, self.DB_MIGRATOR_PASSWORD)


settings = Settings()


def require_jwt_secret() -> None:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set")
