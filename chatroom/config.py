# chatroom/config.py
import os

from dotenv import load_dotenv

# Load .env
load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Runtime settings for the chat server.
    Override via environment variables (or a .env file).
    """

    def __init__(
        self,
        database_url: str = "sqlite+aiosqlite:///./chatroom.db",
        echo_sql: bool = False,
        sweep_interval: float = 15.0,
        stale_after: float = 10.0,
        broadcast_target: str = "Todos",
        cors_origins: list[str] | None = None,
        host: str = "0.0.0.0",
        port: int = 5000,
        log_level: str = "INFO",
    ):
        if sweep_interval <= 0 or stale_after <= 0:
            raise ValueError("sweep_interval and stale_after must be positive")
        # a participant must never survive two full sweeps past expiry
        if stale_after >= sweep_interval * 2:
            raise ValueError(
                f"stale_after ({stale_after}) must be shorter than twice "
                f"the sweep interval ({sweep_interval})"
            )
        self.database_url = database_url
        self.echo_sql = echo_sql
        self.sweep_interval = sweep_interval
        self.stale_after = stale_after
        self.broadcast_target = broadcast_target
        self.cors_origins = cors_origins if cors_origins is not None else ["*"]
        self.host = host
        self.port = port
        self.log_level = log_level

    @classmethod
    def from_env(cls):
        database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./chatroom.db")
        echo_sql = _env_flag("CHATROOM_SQL_ECHO")
        sweep_interval = float(os.getenv("CHATROOM_SWEEP_INTERVAL", "15"))
        stale_after = float(os.getenv("CHATROOM_STALE_AFTER", "10"))
        broadcast_target = os.getenv("CHATROOM_BROADCAST_TARGET", "Todos")
        cors_origins = [
            origin.strip()
            for origin in os.getenv("CHATROOM_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        host = os.getenv("CHATROOM_HOST", "0.0.0.0")
        port = int(os.getenv("CHATROOM_PORT", "5000"))
        log_level = os.getenv("CHATROOM_LOG_LEVEL", "INFO").upper()

        return cls(
            database_url=database_url,
            echo_sql=echo_sql,
            sweep_interval=sweep_interval,
            stale_after=stale_after,
            broadcast_target=broadcast_target,
            cors_origins=cors_origins,
            host=host,
            port=port,
            log_level=log_level,
        )
