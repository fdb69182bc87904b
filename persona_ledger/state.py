from datetime import datetime, timezone
from threading import Lock
from typing import Tuple

from .config import Settings
from .models import NodeInfo
from .registries import CredentialRegistry, IdentityRegistry, ProofRegistry


class LedgerState:
    def __init__(self, settings: Settings) -> None:
        self._lock = Lock()
        self.chain_id = settings.chain_id
        self.node_info = NodeInfo(
            id=settings.node_id,
            moniker=settings.node_moniker,
            version=settings.node_version,
        )
        self.identities = IdentityRegistry()
        self.credentials = CredentialRegistry()
        self.proofs = ProofRegistry()
        self._height = settings.initial_height
        self._latest_time = datetime.now(timezone.utc)

    def current_height(self) -> int:
        with self._lock:
            return self._height

    def advance(self) -> Tuple[int, datetime]:
        with self._lock:
            self._height += 1
            self._latest_time = datetime.now(timezone.utc)
            return self._height, self._latest_time
