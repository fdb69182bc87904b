"""Use-case requirements and credential lookup for the template flow."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from .config import block_time, unix_now
from .state import LedgerState


logger = logging.getLogger(__name__)

DEFAULT_REQUIREMENTS = ["proof-of-age"]

USE_CASE_REQUIREMENTS: Dict[str, List[str]] = {
    "store": ["proof-of-age"],
    "bar": ["proof-of-age"],
    "hotel": ["proof-of-age", "location-proof"],
    "doctor": ["proof-of-age", "health-credential"],
    "bank": ["proof-of-age", "employment-verification", "financial-status"],
    "rental": ["employment-verification", "financial-status", "location-proof"],
    "employer": ["education-credential", "employment-verification"],
    "travel": ["health-credential", "financial-status", "location-proof"],
    "graduate_school": ["education-credential"],
    "investment": ["financial-status", "employment-verification"],
}


class TemplateLookupError(LookupError):
    def __init__(self, message: str, context: Dict[str, str]) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message, **self.context}


def requirements_for(use_case: str) -> List[str]:
    return list(USE_CASE_REQUIREMENTS.get(use_case, DEFAULT_REQUIREMENTS))


def _matches_template(credential: Dict[str, Any], template_id: str) -> bool:
    subject = credential.get("credentialSubject")
    if not isinstance(subject, dict):
        return False
    return template_id in (subject.get("templateId"), subject.get("credentialType"))


def find_template_credential(
    state: LedgerState, did: str, template_id: str
) -> Dict[str, Any]:
    identity = state.identities.get_identity(did)
    if identity is None:
        raise TemplateLookupError("DID not found", {"did": did})

    credentials = state.credentials.list_credentials(identity.controller)
    if not credentials:
        raise TemplateLookupError("No credentials found for this DID", {"did": did})

    match: Optional[Dict[str, Any]] = None
    for record in credentials:
        candidate = record.model_dump()
        if _matches_template(candidate, template_id):
            match = candidate
            break
    if match is None:
        raise TemplateLookupError(
            "Credential not found for the specified template",
            {"did": did, "templateId": template_id},
        )
    logger.info("Found credential for DID %s, TemplateID %s", did, template_id)
    return match


def build_presentation(
    credential: Dict[str, Any], did: str, template_id: str
) -> Dict[str, Any]:
    return {
        "proof": {
            "type": "ZKProof",
            "created": block_time(datetime.now(timezone.utc)),
            "verified": True,
            "templateId": template_id,
        },
        "publicInputs": {
            "templateId": template_id,
            "did": did,
            "timestamp": unix_now(),
        },
        "metadata": {
            "credentialId": credential.get("id"),
            "issuanceDate": credential.get("issuanceDate"),
            "templateId": template_id,
        },
        "credential": credential,
    }
