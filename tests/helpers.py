"""Transaction builders shared by the test modules."""

import json
from typing import Any, Dict


def standard_tx(message: Dict[str, Any]) -> Dict[str, Any]:
    return {"tx": {"body": {"messages": [message]}}}


def create_did_msg(did: str, controller: str) -> Dict[str, Any]:
    return {
        "@type": "/persona.did.v1.MsgCreateDid",
        "creator": controller,
        "did_document": json.dumps({"id": did, "controller": controller}),
    }


def issue_vc_msg(creator: str, vc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "@type": "/persona.vc.v1.MsgIssueCredential",
        "creator": creator,
        "vc_data": json.dumps(vc),
    }


def submit_proof_msg(creator: str, circuit_id: str, proof: str) -> Dict[str, Any]:
    return {
        "@type": "/persona.zk.v1.MsgSubmitProof",
        "creator": creator,
        "circuit_id": circuit_id,
        "proof": proof,
        "public_inputs": ["18", "1700000000"],
        "metadata": {"template": "proof-of-age"},
    }
