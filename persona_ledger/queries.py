from typing import Any, Dict, List, Sequence
import logging

from pydantic import BaseModel

from .config import Settings, unix_now
from .models import Balance, CircuitRecord, IdentityRecord, Pagination, ProofRecord
from .state import LedgerState


logger = logging.getLogger(__name__)

DEMO_CONTROLLER = "cosmos1test1"
DEMO_IDENTITIES = (
    ("did:persona:123", "cosmos1test1"),
    ("did:persona:456", "cosmos1test2"),
)
MOCK_BALANCE = Balance(denom="uprsn", amount="1000000000")


def paginated(key: str, items: Sequence[Any]) -> Dict[str, Any]:
    rows = [item.model_dump() if isinstance(item, BaseModel) else item for item in items]
    return {
        key: rows,
        "pagination": Pagination(total=str(len(rows))).model_dump(),
    }


def demo_identity(identifier: str, controller: str = DEMO_CONTROLLER) -> IdentityRecord:
    now = unix_now()
    return IdentityRecord(
        id=identifier, controller=controller, created_at=now, updated_at=now
    )


def demo_credential() -> Dict[str, Any]:
    return {
        "id": "vc_001",
        "issuer_did": "did:persona:123",
        "subject_did": "did:persona:456",
        "issued_at": unix_now(),
        "is_revoked": False,
    }


def demo_proof() -> Dict[str, Any]:
    return {
        "id": "proof_001",
        "circuit_id": "circuit_001",
        "prover": DEMO_CONTROLLER,
        "is_verified": True,
        "created_at": unix_now(),
    }


class LedgerQueries:
    """Read-only views over the ledger state, shaped like the chain's REST API."""

    def __init__(self, state: LedgerState, settings: Settings) -> None:
        self.state = state
        self.settings = settings

    def list_identities(self) -> Dict[str, Any]:
        created = self.state.identities.list_identities()
        identities: List[IdentityRecord] = [
            demo_identity(identifier, controller)
            for identifier, controller in DEMO_IDENTITIES
        ]
        identities.extend(created)
        logger.info(
            "Returning %d DIDs (including %d created)", len(identities), len(created)
        )
        return paginated("did_documents", identities)

    def get_identity(self, identifier: str) -> Dict[str, Any]:
        record = self.state.identities.get_identity(identifier)
        if record is None:
            if not self.settings.did_fallback:
                return {"did_document": None}
            logger.debug("DID %s unknown, synthesizing demo document", identifier)
            record = demo_identity(identifier)
        return {"did_document": record.model_dump()}

    def get_identity_by_controller(self, controller: str) -> Dict[str, Any]:
        record = self.state.identities.get_identity_by_controller(controller)
        if record is None:
            logger.info("No DID found for controller: %s", controller)
            return {"did_document": None}
        logger.info("Found DID for controller %s: %s", controller, record.id)
        return {"did_document": record.model_dump()}

    def list_credentials(self) -> Dict[str, Any]:
        records: List[Any] = [demo_credential()]
        if self.settings.list_includes_created:
            records.extend(self.state.credentials.all_credentials())
        return paginated("vc_records", records)

    def credentials_by_controller(self, controller: str) -> Dict[str, Any]:
        records = self.state.credentials.list_credentials(controller)
        logger.info("Returning %d credentials for controller %s", len(records), controller)
        return paginated("vc_records", records)

    def list_proofs(self) -> Dict[str, Any]:
        records: List[Any] = [demo_proof()]
        if self.settings.list_includes_created:
            records.extend(self.state.proofs.all_proofs())
        return paginated("zk_proofs", records)

    def proofs_by_controller(self, controller: str) -> Dict[str, Any]:
        records: List[ProofRecord] = self.state.proofs.list_proofs(controller)
        logger.info("Returning %d proofs for controller %s", len(records), controller)
        return paginated("zk_proofs", records)

    def list_circuits(self) -> Dict[str, Any]:
        circuit = CircuitRecord(
            id="circuit_001",
            name="test_circuit",
            creator=DEMO_CONTROLLER,
            created_at=unix_now(),
        )
        return paginated("circuits", [circuit])

    def balance(self, address: str) -> Dict[str, Any]:
        return paginated("balances", [MOCK_BALANCE])
