from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class ServerConfig:
    db_path: str = "woodblock.db"
    jwt_secret: str = "secret"
    token_ttl_seconds: int = 7 * 24 * 3600
    bcrypt_rounds: int = 10
    leaderboard_size: int = 10
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "ServerConfig":
        defaults = cls()
        return cls(
            db_path=os.getenv("WOODBLOCK_DB_PATH", defaults.db_path),
            jwt_secret=os.getenv("WOODBLOCK_JWT_SECRET", defaults.jwt_secret),
            token_ttl_seconds=int(os.getenv("WOODBLOCK_TOKEN_TTL", defaults.token_ttl_seconds)),
            bcrypt_rounds=int(os.getenv("WOODBLOCK_BCRYPT_ROUNDS", defaults.bcrypt_rounds)),
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
        )
