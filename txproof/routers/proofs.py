import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from txproof.audit import audit_request
from txproof.config import settings
from txproof.crypto import digest_size, get_hasher, normalize_tx_hash, tx_leaf
from txproof.db import get_db
from txproof.inclusion import InclusionStatus, VerificationOutcome, check_inclusion, outcome_for_proof
from txproof.ledger import get_block, prove_transaction
from txproof.merkle import MalformedProof, parse_proof
from txproof.metrics import PROOFS, VERIFICATIONS
from txproof.rate_limit import enforce_rl
from txproof.schemas import ProofOut, ProofRequest, VerifyRequest, VerifyResult
from txproof.util import from_hex, to_hex

logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"], dependencies=[Depends(enforce_rl)])


@router.post("/proofs", response_model=ProofOut)
def proof(req: ProofRequest, request: Request, db: Session = Depends(get_db)):
    try:
        tx_hash = normalize_tx_hash(req.tx_hash)
    except ValueError:
        raise HTTPException(status_code=422, detail="invalid_tx_hash")

    block = get_block(db, req.block_number)
    if not block:
        raise HTTPException(status_code=404, detail="root_not_published")

    pr = prove_transaction(db, block, tx_hash)
    # check against the published root, not the one just recomputed
    outcome = outcome_for_proof(pr, from_hex(block.root_hex), get_hasher(block.hash_alg))
    PROOFS.labels(status=outcome.status.value).inc()

    audit_request(db, request, "merkle_proof", block.block_number, {"tx_hash": tx_hash, "status": outcome.status.value})
    db.commit()

    return ProofOut(
        block_number=int(block.block_number),
        tx_hash=tx_hash,
        leaf=to_hex(pr.leaf),
        root=block.root_hex,
        leaf_index=pr.index,
        siblings=[s.to_wire() for s in pr.siblings],
        **outcome.as_dict(),
    )


@router.post("/verify", response_model=VerifyResult)
def verify(req: VerifyRequest, request: Request, db: Session = Depends(get_db)):
    hash_alg = req.hash_alg or settings.hash_alg
    root_hex = req.root
    if req.block_number is not None:
        block = get_block(db, req.block_number)
        if not block:
            raise HTTPException(status_code=404, detail="root_not_published")
        root_hex = block.root_hex
        hash_alg = req.hash_alg or block.hash_alg

    hasher = get_hasher(hash_alg)
    width = digest_size(hasher)
    leaf = root = None
    try:
        leaf = tx_leaf(req.tx_hash, hasher) if req.tx_hash is not None else from_hex(req.leaf)
        root = from_hex(root_hex)
        if len(leaf) != width or len(root) != width:
            raise MalformedProof(f"leaf and root must be {width}-byte digests")
        steps = parse_proof(req.siblings, width)
    except ValueError as e:
        # MalformedProof, bad hex, bad tx hash: refused, never a server error
        logger.info("verify: malformed input: %s", e)
        outcome = VerificationOutcome(InclusionStatus.MALFORMED)
    else:
        outcome = check_inclusion(leaf, steps, root, hasher)

    VERIFICATIONS.labels(status=outcome.status.value).inc()
    audit_request(db, request, "verify_proof", req.block_number, {"status": outcome.status.value, "hash_alg": hash_alg})
    db.commit()

    return VerifyResult(
        leaf=to_hex(leaf) if leaf is not None else None,
        root=to_hex(root) if root is not None else None,
        **outcome.as_dict(),
    )
