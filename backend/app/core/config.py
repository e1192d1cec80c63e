from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


# Load backend/.env if it exists so local SMTP credentials are available
# without exporting them in the shell first.
BASE_DIR = Path(__file__).resolve().parents[2]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _float_env(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except Exception:
        return default


def _int_value(raw: str) -> int:
    try:
        return int(raw.strip())
    except Exception:
        return 0


class Settings:
    PROJECT_NAME = "Eco Contact API"
    API_V1_STR = "/api"

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(_float_env("PORT", 8000))

    LOG_LEVEL =os.getenv("LOG_LEVEL", "INFO").upper()

    _cors_origins = os.getenv("CORS_ORIGINS", "*")

    # If wildcard is present, treat as allow-all
    if "*" in _cors_origins:
        CORS_ORIGINS = ["*"]
    else:
        CORS_ORIGINS = [o.strip() for o in _cors_origins.split(",") if o.strip()]

    MAIL_BRAND = os.getenv("MAIL_BRAND", "에코")
    SMTP_TIMEOUT_SECONDS = _float_env("SMTP_TIMEOUT_SECONDS", 30.0)


settings = Settings()


@dataclass(frozen=True)
class MailSettings:
    """SMTP relay configuration.

    Built from the environment on every request so a missing variable shows up
    as a configuration error on the response instead of a crash at startup.
    """

    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    mail_to: str = ""
    mail_from: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MailSettings":
        env = os.environ if environ is None else environ
        user = env.get("SMTP_USER", "")
        return cls(
            host=env.get("SMTP_HOST", ""),
            port=_int_value(env.get("SMTP_PORT", "")),
            user=user,
            password=env.get("SMTP_PASS", ""),
            mail_to=env.get("MAIL_TO", ""),
            mail_from=env.get("MAIL_FROM", "") or user,
        )

    @property
    def use_tls(self) -> bool:
        return self.port == 465

    def missing_fields(self) -> list[str]:
        checks = [
            ("SMTP_HOST", self.host),
            ("SMTP_PORT", self.port),
            ("SMTP_USER", self.user),
            ("SMTP_PASS", self.password),
            ("MAIL_TO", self.mail_to),
            ("MAIL_FROM", self.mail_from),
        ]
        return [name for name, value in checks if not value]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()
