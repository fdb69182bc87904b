from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4
import logging

from .config import unix_now
from .messages import (
    CreateIdentity,
    IssueCredential,
    Message,
    MessageValidationError,
    SubmitProof,
    UnknownMessage,
    classify,
    decode_transaction,
    parse_message,
)
from .models import CredentialRecord, IdentityRecord, ProofRecord, TxResponse
from .state import LedgerState


logger = logging.getLogger(__name__)

APPLIED = "applied"
IGNORED = "ignored"
REJECTED = "rejected"


@dataclass
class ApplyOutcome:
    status: str
    type_url: Optional[str] = None
    reason: Optional[str] = None


def proof_id(created_at: int) -> str:
    return f"proof_{created_at}_{uuid4().hex[:8]}"


def tx_hash(timestamp: int) -> str:
    return f"0x{timestamp:064d}"


class TransactionProcessor:
    """Applies broadcast transactions to the ledger registries.

    Broadcasts never fail: malformed bodies, unknown message types and
    messages with missing fields are logged and reported as an outcome,
    while the caller always gets a ``code=0`` receipt.
    """

    def __init__(self, state: LedgerState) -> None:
        self.state = state

    def broadcast(self, raw: bytes) -> Tuple[TxResponse, Optional[ApplyOutcome]]:
        outcome = None
        tx = decode_transaction(raw)
        if tx is not None:
            message = classify(tx)
            if message is None:
                logger.info("Transaction carries no messages")
            else:
                outcome = self.apply(message)
        receipt = TxResponse(
            txhash=tx_hash(unix_now()),
            height=self.state.current_height(),
        )
        return receipt, outcome

    def apply(self, message: Dict[str, Any]) -> ApplyOutcome:
        try:
            parsed = parse_message(message)
        except MessageValidationError as exc:
            logger.warning("Rejected %s: %s %s", exc.type_url, exc.reason, exc.found)
            return ApplyOutcome(status=REJECTED, type_url=exc.type_url, reason=exc.reason)
        return self.commit(parsed)

    def commit(self, message: Message) -> ApplyOutcome:
        if isinstance(message, CreateIdentity):
            self._create_identity(message)
        elif isinstance(message, IssueCredential):
            self._issue_credential(message)
        elif isinstance(message, SubmitProof):
            self._submit_proof(message)
        else:
            logger.info(
                "Ignoring message type %s (fields: %s)",
                message.type_url,
                ", ".join(message.fields) if isinstance(message, UnknownMessage) else "",
            )
            return ApplyOutcome(status=IGNORED, type_url=message.type_url)
        return ApplyOutcome(status=APPLIED, type_url=message.type_url)

    def _create_identity(self, message: CreateIdentity) -> None:
        if message.creator is not None and message.creator != message.controller:
            logger.warning(
                "DID %s submitted by %s names controller %s",
                message.identifier,
                message.creator,
                message.controller,
            )
        now = unix_now()
        record = IdentityRecord(
            id=message.identifier,
            controller=message.controller,
            created_at=now,
            updated_at=now,
            is_active=True,
        )
        self.state.identities.insert_identity(message.identifier, record)
        logger.info("Stored DID: %s for controller: %s", record.id, record.controller)

    def _issue_credential(self, message: IssueCredential) -> None:
        record = CredentialRecord.model_validate(
            {**message.payload, "created_at": unix_now(), "is_revoked": False}
        )
        self.state.credentials.append_credential(message.controller, record)
        logger.info("Stored credential for controller: %s", message.controller)

    def _submit_proof(self, message: SubmitProof) -> None:
        now = unix_now()
        record = ProofRecord(
            id=proof_id(now),
            circuit_id=message.circuit_id,
            prover=message.prover,
            proof_data=message.proof_data,
            public_inputs=message.public_inputs,
            metadata=message.metadata,
            is_verified=True,
            created_at=now,
        )
        self.state.proofs.append_proof(message.prover, record)
        logger.info("Stored proof %s for controller: %s", record.id, message.prover)
