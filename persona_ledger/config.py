from dataclasses import dataclass
from datetime import datetime, timezone
import os
import time

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_name: str = "Persona Mock Ledger"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))
    chain_id: str = os.getenv("CHAIN_ID", "persona-testnet-1")
    initial_height: int = int(os.getenv("INITIAL_HEIGHT", "1000"))
    node_id: str = os.getenv("NODE_ID", "mock-node-001")
    node_moniker: str = os.getenv("NODE_MONIKER", "testnet-node")
    node_version: str = os.getenv("NODE_VERSION", "v1.0.0-test")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    list_includes_created: bool = (
        os.getenv("LIST_INCLUDES_CREATED", "false").lower() == "true"
    )
    did_fallback: bool = os.getenv("DID_FALLBACK", "true").lower() == "true"


settings = Settings()


def unix_now() -> int:
    return int(time.time())


def block_time(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
