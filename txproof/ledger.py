import datetime as dt
import logging
from sqlalchemy.orm import Session

from txproof.crypto import get_hasher, normalize_tx_hash, tx_leaf
from txproof.merkle import MerkleProof, MerkleTree
from txproof.models import BlockRoot, BlockTransaction
from txproof.util import to_hex

logger = logging.getLogger(__name__)


def get_block(db: Session, block_number: int) -> BlockRoot | None:
    return db.query(BlockRoot).filter(BlockRoot.block_number == block_number).first()


def load_tx_hashes(db: Session, block_number: int) -> list[str]:
    rows = (
        db.query(BlockTransaction)
        .filter(BlockTransaction.block_number == block_number)
        .order_by(BlockTransaction.idx.asc())
        .all()
    )
    return [r.tx_hash for r in rows]


def build_block_tree(tx_hashes: list[str], hash_alg: str) -> MerkleTree:
    hasher = get_hasher(hash_alg)
    return MerkleTree([tx_leaf(h, hasher) for h in tx_hashes], hasher)


def publish_root(db: Session, block_number: int, tx_hashes: list[str], hash_alg: str) -> BlockRoot:
    """Commit the Merkle root of a block's ordered transactions.

    Publishing the same transactions again leaves the stored row untouched;
    a different transaction set (reorg) replaces it.
    """
    hashes = [normalize_tx_hash(h) for h in tx_hashes]
    tree = build_block_tree(hashes, hash_alg)
    root_hex = to_hex(tree.root)

    row = get_block(db, block_number)
    if row is not None:
        if row.root_hex == root_hex and row.hash_alg == hash_alg:
            return row
        logger.warning("block %d: replacing published root %s with %s", block_number, row.root_hex, root_hex)
        db.query(BlockTransaction).filter(BlockTransaction.block_number == block_number).delete()
        row.root_hex = root_hex
        row.hash_alg = hash_alg
        row.leaf_count = tree.leaf_count
        row.updated_at = dt.datetime.now(dt.timezone.utc)
    else:
        row = BlockRoot(block_number=block_number, root_hex=root_hex, leaf_count=tree.leaf_count, hash_alg=hash_alg)
        db.add(row)

    for i, (h, leaf) in enumerate(zip(hashes, tree.layers[0])):
        db.add(BlockTransaction(block_number=block_number, idx=i, tx_hash=h, leaf_hex=to_hex(leaf)))
    db.flush()

    logger.info("block %d: published root %s over %d transactions", block_number, root_hex, tree.leaf_count)
    return row


def prove_transaction(db: Session, block: BlockRoot, tx_hash: str) -> MerkleProof:
    hashes = load_tx_hashes(db, block.block_number)
    tree = build_block_tree(hashes, block.hash_alg)
    return tree.proof_for(tx_leaf(tx_hash, tree.hasher))
