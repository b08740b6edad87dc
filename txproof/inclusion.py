from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from txproof.crypto import Hasher, keccak256
from txproof.merkle import MerkleProof, verify_proof

logger = logging.getLogger(__name__)


class InclusionStatus(str, enum.Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"
    NOT_INCLUDED = "not_included"
    MALFORMED = "malformed_proof"


MESSAGES = {
    InclusionStatus.VERIFIED: "Transaction is included in the Merkle root.",
    InclusionStatus.REJECTED: "Proof was checked and does not match the Merkle root.",
    InclusionStatus.NOT_INCLUDED: "The provided transaction hash is not part of the Merkle tree.",
    InclusionStatus.MALFORMED: "Proof is malformed and cannot be checked.",
}


@dataclass(frozen=True)
class VerificationOutcome:
    status: InclusionStatus

    @property
    def verified(self) -> bool:
        return self.status is InclusionStatus.VERIFIED

    @property
    def message(self) -> str:
        return MESSAGES[self.status]

    def as_dict(self) -> dict:
        return {"verified": self.verified, "status": self.status.value, "message": self.message}


def check_inclusion(
    leaf: bytes,
    steps: Sequence[Tuple[str, bytes]],
    root: bytes,
    hasher: Hasher = keccak256,
    included: Optional[bool] = None,
) -> VerificationOutcome:
    # an empty proof only proves the single-leaf tree (leaf == root)
    if included is False or (included is None and not steps and leaf != root):
        return VerificationOutcome(InclusionStatus.NOT_INCLUDED)
    try:
        ok = verify_proof(leaf, steps, root, hasher)
    except Exception:
        logger.exception("proof verification raised; reporting as not verified")
        ok = False
    return VerificationOutcome(InclusionStatus.VERIFIED if ok else InclusionStatus.REJECTED)


def outcome_for_proof(proof: MerkleProof, root: bytes, hasher: Hasher = keccak256) -> VerificationOutcome:
    return check_inclusion(proof.leaf, proof.siblings, root, hasher, included=proof.included)
