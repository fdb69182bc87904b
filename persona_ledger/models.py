from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict


class IdentityRecord(BaseModel):
    id: str
    controller: str
    created_at: int
    updated_at: int
    is_active: bool = True


class CredentialRecord(BaseModel):
    # Credential payloads are client-defined; every decoded key is kept.
    model_config = ConfigDict(extra="allow")

    created_at: int
    is_revoked: bool = False


class ProofRecord(BaseModel):
    id: str
    circuit_id: str
    prover: str
    proof_data: str
    public_inputs: Optional[Any] = None
    metadata: Optional[Any] = None
    is_verified: bool = True
    created_at: int


class CircuitRecord(BaseModel):
    id: str
    name: str
    creator: str
    is_active: bool = True
    created_at: int


class Pagination(BaseModel):
    next_key: Optional[str] = None
    total: str


class TxResponse(BaseModel):
    txhash: str
    height: int
    code: int = 0
    data: str = ""


class NodeInfo(BaseModel):
    id: str
    moniker: str
    version: str


class Balance(BaseModel):
    denom: str
    amount: str


class RequirementsResponse(BaseModel):
    requirements: List[str]
    did: str
    useCase: str
    timestamp: int
