# games/battle/config.py
import os
import secrets
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class BattleConfig:
    jwt_secret: Optional[str] = None
    jwt_algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    client_url: str = "*"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    async_mode: Optional[str] = None
    secret_key: str = field(default_factory=lambda: secrets.token_hex(16))

    @classmethod
    def from_env(cls) -> "BattleConfig":
        return cls(
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_algorithms=_split(os.getenv("JWT_ALGORITHMS", "HS256")) or ["HS256"],
            client_url=os.getenv("CLIENT_URL", "*"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
            secret_key=os.getenv("SECRET_KEY") or secrets.token_hex(16),
        )
