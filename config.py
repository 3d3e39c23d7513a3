import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Application settings, built once and handed to create_app"""

    jwt_secret: str
    database_url: str = "sqlite:///./tasks.db"
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 7
    bcrypt_rounds: int = 10
    cors_origins: str = "*"
    log_level: str = "INFO"
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables (and a .env file if present)

        Raises:
            ValueError: If JWT_SECRET is not set
        """
        load_dotenv()

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            raise ValueError("JWT_SECRET environment variable is not set")

        return cls(
            jwt_secret=jwt_secret,
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            token_expire_days=int(os.getenv("TOKEN_EXPIRE_DAYS", str(cls.token_expire_days))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", str(cls.bcrypt_rounds))),
            cors_origins=os.getenv("CORS_ORIGINS", cls.cors_origins),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            sql_echo=_as_bool(os.getenv("SQL_ECHO", "false")),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", str(cls.port))),
        )

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
