"""Transaction envelope decoding and message parsing.

Two envelope shapes are accepted: a flat ``{"msgs": [...]}`` body and the
standard ``{"tx": {"body": {"messages": [...]}}}`` body. Only the first
message of a transaction is considered.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import json
import logging


logger = logging.getLogger(__name__)

MSG_CREATE_DID = "/persona.did.v1.MsgCreateDid"
MSG_ISSUE_CREDENTIAL = "/persona.vc.v1.MsgIssueCredential"
MSG_SUBMIT_PROOF = "/persona.zk.v1.MsgSubmitProof"


class MessageValidationError(ValueError):
    def __init__(
        self, type_url: str, reason: str, found: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(f"{type_url}: {reason}")
        self.type_url = type_url
        self.reason = reason
        self.found = found or {}


@dataclass
class CreateIdentity:
    identifier: str
    controller: str
    creator: Optional[str] = None
    type_url: str = MSG_CREATE_DID


@dataclass
class IssueCredential:
    controller: str
    payload: Dict[str, Any]
    type_url: str = MSG_ISSUE_CREDENTIAL


@dataclass
class SubmitProof:
    prover: str
    proof_data: str
    circuit_id: str
    public_inputs: Any = None
    metadata: Any = None
    type_url: str = MSG_SUBMIT_PROOF


@dataclass
class UnknownMessage:
    type_url: Optional[str] = None
    fields: List[str] = field(default_factory=list)


Message = Union[CreateIdentity, IssueCredential, SubmitProof, UnknownMessage]


def decode_transaction(raw: bytes) -> Optional[Dict[str, Any]]:
    try:
        decoded = json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("Ignoring undecodable transaction body (%d bytes)", len(raw))
        return None
    if not isinstance(decoded, dict):
        logger.warning("Ignoring transaction body of type %s", type(decoded).__name__)
        return None
    return decoded


def extract_messages(tx: Dict[str, Any]) -> List[Any]:
    msgs = tx.get("msgs")
    if isinstance(msgs, list):
        return msgs
    body = tx.get("tx")
    if isinstance(body, dict):
        body = body.get("body")
        if isinstance(body, dict):
            messages = body.get("messages")
            if isinstance(messages, list):
                return messages
    return []


def classify(tx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the first message object of a transaction, if any."""
    messages = extract_messages(tx)
    if not messages:
        return None
    if len(messages) > 1:
        logger.info("Transaction carries %d messages; only the first is applied", len(messages))
    first = messages[0]
    if not isinstance(first, dict):
        return None
    return first


def parse_message(message: Dict[str, Any]) -> Message:
    type_url = message.get("@type")
    if type_url == MSG_CREATE_DID:
        return _parse_create_identity(message)
    if type_url == MSG_ISSUE_CREDENTIAL:
        return _parse_issue_credential(message)
    if type_url == MSG_SUBMIT_PROOF:
        return _parse_submit_proof(message)
    return UnknownMessage(
        type_url=type_url if isinstance(type_url, str) else None,
        fields=sorted(key for key in message if key != "@type"),
    )


def _string_field(message: Dict[str, Any], *names: str) -> Optional[str]:
    # First non-empty string among the synonyms wins.
    for name in names:
        value = message.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def _decode_object(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return value
    if not isinstance(value, str):
        return None
    try:
        decoded = json.loads(value)
    except (ValueError, RecursionError):
        return None
    return decoded if isinstance(decoded, dict) else None


def _parse_create_identity(message: Dict[str, Any]) -> CreateIdentity:
    raw_document = message.get("did_document")
    if raw_document is None:
        raise MessageValidationError(MSG_CREATE_DID, "did_document not found")
    document = _decode_object(raw_document)
    if document is None:
        raise MessageValidationError(
            MSG_CREATE_DID,
            "did_document is not a JSON object",
            {"did_document": raw_document},
        )
    identifier = document.get("id")
    controller = document.get("controller")
    if not isinstance(identifier, str) or not isinstance(controller, str):
        raise MessageValidationError(
            MSG_CREATE_DID,
            "did_document requires string id and controller",
            {"id": identifier, "controller": controller},
        )
    return CreateIdentity(
        identifier=identifier,
        controller=controller,
        creator=_string_field(message, "creator"),
    )


def _parse_issue_credential(message: Dict[str, Any]) -> IssueCredential:
    controller = _string_field(message, "creator", "controller")
    if controller is None:
        raise MessageValidationError(
            MSG_ISSUE_CREDENTIAL, "creator not found", {"vc_data": message.get("vc_data")}
        )
    raw_payload = message.get("vc_data")
    payload = _decode_object(raw_payload)
    if payload is None:
        raise MessageValidationError(
            MSG_ISSUE_CREDENTIAL,
            "vc_data is missing or not a JSON object",
            {"creator": controller, "vc_data": raw_payload},
        )
    return IssueCredential(controller=controller, payload=payload)


def _parse_submit_proof(message: Dict[str, Any]) -> SubmitProof:
    prover = _string_field(message, "creator", "prover")
    proof_data = _string_field(message, "proof", "proof_data")
    circuit_id = _string_field(message, "circuit_id")
    if prover is None or proof_data is None or circuit_id is None:
        raise MessageValidationError(
            MSG_SUBMIT_PROOF,
            "missing required proof fields",
            {"prover": prover, "proof_data": proof_data, "circuit_id": circuit_id},
        )
    return SubmitProof(
        prover=prover,
        proof_data=proof_data,
        circuit_id=circuit_id,
        public_inputs=message.get("public_inputs"),
        metadata=message.get("metadata"),
    )
