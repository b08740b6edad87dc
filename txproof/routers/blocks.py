import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from txproof.audit import audit_request
from txproof.config import settings
from txproof.crypto import get_hasher
from txproof.db import get_db
from txproof.ledger import get_block, load_tx_hashes, publish_root
from txproof.metrics import ROOTS
from txproof.models import BlockRoot
from txproof.rate_limit import enforce_rl
from txproof.rpc import BlockSource, BlockSourceError, EmptyBlock, InvalidBlockNumber, get_block_source, parse_block_number
from txproof.schemas import BlockOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blocks", tags=["blocks"], dependencies=[Depends(enforce_rl)])


def _block_out(row: BlockRoot, transactions: list[str]) -> BlockOut:
    return BlockOut(
        block_number=int(row.block_number),
        root=row.root_hex,
        leaf_count=int(row.leaf_count),
        hash_alg=row.hash_alg,
        published_at=row.published_at.isoformat(),
        transactions=transactions,
    )


@router.post("/{block_number}/root", response_model=BlockOut)
def publish(block_number: str, request: Request, source: BlockSource = Depends(get_block_source), db: Session = Depends(get_db)):
    try:
        n = parse_block_number(block_number)
        tx_hashes = source.transaction_hashes(n)
    except InvalidBlockNumber:
        raise HTTPException(status_code=400, detail="invalid_block_number")
    except EmptyBlock:
        raise HTTPException(status_code=404, detail="no_transactions")
    except BlockSourceError:
        logger.exception("block %s: fetch failed", block_number)
        raise HTTPException(status_code=502, detail="block_source_unavailable")

    if len(tx_hashes) > settings.max_block_transactions:
        raise HTTPException(status_code=413, detail="too_many_transactions")

    try:
        get_hasher(settings.hash_alg)
    except ValueError:
        logger.error("unsupported TXPROOF_HASH_ALG %r", settings.hash_alg)
        raise HTTPException(status_code=500, detail="hash_alg_misconfigured")

    try:
        row = publish_root(db, n, tx_hashes, settings.hash_alg)
    except ValueError:
        logger.exception("block %d: source returned malformed transaction hashes", n)
        raise HTTPException(status_code=502, detail="block_source_malformed")

    audit_request(db, request, "publish_root", n, {"root": row.root_hex, "leaf_count": row.leaf_count})
    db.commit()
    ROOTS.inc()
    return _block_out(row, load_tx_hashes(db, n))


@router.get("/{block_number}", response_model=BlockOut)
def show(block_number: str, db: Session = Depends(get_db)):
    try:
        n = parse_block_number(block_number)
    except InvalidBlockNumber:
        raise HTTPException(status_code=400, detail="invalid_block_number")
    row = get_block(db, n)
    if not row:
        raise HTTPException(status_code=404, detail="root_not_published")
    return _block_out(row, load_tx_hashes(db, n))
