from threading import Lock
from typing import Dict, List, Optional
import logging

from .models import CredentialRecord, IdentityRecord, ProofRecord


logger = logging.getLogger(__name__)


class IdentityRegistry:
    """DID documents keyed by identifier, with a controller -> identifier index.

    Inserts overwrite. The controller index is not unique-enforced: a later
    insert for the same controller repoints it.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._identities: Dict[str, IdentityRecord] = {}
        self._by_controller: Dict[str, str] = {}

    def insert_identity(self, identifier: str, record: IdentityRecord) -> None:
        with self._lock:
            previous = self._identities.get(identifier)
            if previous is not None and previous.controller != record.controller:
                logger.warning(
                    "DID %s controller changed from %s to %s",
                    identifier,
                    previous.controller,
                    record.controller,
                )
            self._identities[identifier] = record
            self._by_controller[record.controller] = identifier

    def get_identity(self, identifier: str) -> Optional[IdentityRecord]:
        with self._lock:
            return self._identities.get(identifier)

    def get_identity_by_controller(self, controller: str) -> Optional[IdentityRecord]:
        with self._lock:
            identifier = self._by_controller.get(controller)
            if identifier is None:
                return None
            return self._identities.get(identifier)

    def list_identities(self) -> List[IdentityRecord]:
        with self._lock:
            return list(self._identities.values())


class CredentialRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._by_controller: Dict[str, List[CredentialRecord]] = {}

    def append_credential(self, controller: str, record: CredentialRecord) -> None:
        with self._lock:
            self._by_controller.setdefault(controller, []).append(record)

    def list_credentials(self, controller: str) -> List[CredentialRecord]:
        with self._lock:
            return list(self._by_controller.get(controller, []))

    def all_credentials(self) -> List[CredentialRecord]:
        with self._lock:
            return [
                record
                for records in self._by_controller.values()
                for record in records
            ]


class ProofRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._by_prover: Dict[str, List[ProofRecord]] = {}

    def append_proof(self, prover: str, record: ProofRecord) -> None:
        with self._lock:
            self._by_prover.setdefault(prover, []).append(record)

    def list_proofs(self, prover: str) -> List[ProofRecord]:
        with self._lock:
            return list(self._by_prover.get(prover, []))

    def all_proofs(self) -> List[ProofRecord]:
        with self._lock:
            return [record for records in self._by_prover.values() for record in records]
