"""Unit tests for the identity, credential and proof registries."""

from persona_ledger.models import CredentialRecord, IdentityRecord, ProofRecord
from persona_ledger.registries import CredentialRegistry, IdentityRegistry, ProofRegistry


def _identity(did: str, controller: str, ts: int = 100) -> IdentityRecord:
    return IdentityRecord(id=did, controller=controller, created_at=ts, updated_at=ts)


def test_insert_identity_overwrites_same_identifier() -> None:
    """A second insert at the same identifier replaces the first record."""
    registry = IdentityRegistry()
    registry.insert_identity("did:x:1", _identity("did:x:1", "addrA", ts=1))
    registry.insert_identity("did:x:1", _identity("did:x:1", "addrA", ts=2))

    record = registry.get_identity("did:x:1")
    assert record is not None
    assert record.created_at == 2
    assert len(registry.list_identities()) == 1


def test_get_identity_by_controller_resolves_index() -> None:
    registry = IdentityRegistry()
    registry.insert_identity("did:x:1", _identity("did:x:1", "addrA"))

    record = registry.get_identity_by_controller("addrA")
    assert record is not None
    assert record.id == "did:x:1"


def test_unknown_identity_lookups_return_none() -> None:
    registry = IdentityRegistry()

    assert registry.get_identity("did:missing") is None
    assert registry.get_identity_by_controller("nobody") is None


def test_controller_index_follows_last_writer() -> None:
    """Overwriting a DID with a new controller indexes the new controller."""
    registry = IdentityRegistry()
    registry.insert_identity("did:x:1", _identity("did:x:1", "addrA"))
    registry.insert_identity("did:x:1", _identity("did:x:1", "addrB"))

    assert registry.get_identity("did:x:1").controller == "addrB"
    assert registry.get_identity_by_controller("addrB").id == "did:x:1"


def test_credentials_append_in_order() -> None:
    registry = CredentialRegistry()
    for n in range(3):
        registry.append_credential(
            "addrB", CredentialRecord.model_validate({"id": f"vc{n}", "created_at": n})
        )

    records = registry.list_credentials("addrB")
    assert [record.model_dump()["id"] for record in records] == ["vc0", "vc1", "vc2"]


def test_list_credentials_unknown_controller_is_empty_list() -> None:
    registry = CredentialRegistry()

    assert registry.list_credentials("unknown-controller") == []


def test_list_credentials_returns_copy() -> None:
    registry = CredentialRegistry()
    registry.append_credential("addrB", CredentialRecord(created_at=1))

    registry.list_credentials("addrB").clear()

    assert len(registry.list_credentials("addrB")) == 1


def test_all_credentials_spans_controllers() -> None:
    registry = CredentialRegistry()
    registry.append_credential("addrA", CredentialRecord(created_at=1))
    registry.append_credential("addrB", CredentialRecord(created_at=2))

    assert len(registry.all_credentials()) == 2


def test_proofs_keyed_by_prover() -> None:
    registry = ProofRegistry()
    proof = ProofRecord(
        id="proof_1", circuit_id="circ1", prover="addrC", proof_data="abc", created_at=1
    )
    registry.append_proof("addrC", proof)

    assert registry.list_proofs("addrC") == [proof]
    assert registry.list_proofs("addrD") == []
    assert registry.all_proofs() == [proof]
