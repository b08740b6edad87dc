import pytest

from conftest import txh
from txproof.crypto import keccak256, sha256, tx_leaf
from txproof.ledger import get_block, load_tx_hashes, prove_transaction, publish_root
from txproof.merkle import build_root, verify_proof
from txproof.models import BlockTransaction
from txproof.util import from_hex, to_hex


def test_publish_stores_root_and_order(db):
    hashes = [txh(i) for i in range(5)]
    row = publish_root(db, 7, hashes, "keccak256")
    db.commit()
    assert row.root_hex == to_hex(build_root([tx_leaf(h) for h in hashes]))
    assert row.leaf_count == 5
    assert load_tx_hashes(db, 7) == hashes
    leaves = db.query(BlockTransaction).filter(BlockTransaction.block_number == 7).order_by(BlockTransaction.idx).all()
    assert [x.leaf_hex for x in leaves] == [to_hex(tx_leaf(h)) for h in hashes]


def test_publish_normalizes_hashes(db):
    publish_root(db, 8, [txh(1).upper().replace("0X", "0x")], "keccak256")
    assert load_tx_hashes(db, 8) == [txh(1)]


def test_republish_same_is_noop(db):
    hashes = [txh(i) for i in range(3)]
    first = publish_root(db, 9, hashes, "keccak256")
    db.commit()
    published_at = first.published_at
    again = publish_root(db, 9, hashes, "keccak256")
    db.commit()
    assert again.root_hex == first.root_hex
    assert again.published_at == published_at
    assert db.query(BlockTransaction).filter(BlockTransaction.block_number == 9).count() == 3


def test_republish_different_set_replaces(db):
    publish_root(db, 10, [txh(i) for i in range(3)], "keccak256")
    db.commit()
    new = [txh(i) for i in range(20, 22)]
    row = publish_root(db, 10, new, "keccak256")
    db.commit()
    assert load_tx_hashes(db, 10) == new
    assert row.leaf_count == 2
    assert row.root_hex == to_hex(build_root([tx_leaf(h) for h in new]))


def test_publish_rejects_malformed_hash(db):
    with pytest.raises(ValueError):
        publish_root(db, 11, ["0x1234"], "keccak256")


def test_prove_transaction(db):
    hashes = [txh(i) for i in range(6)]
    publish_root(db, 12, hashes, "keccak256")
    db.commit()
    block = get_block(db, 12)
    pr = prove_transaction(db, block, hashes[4])
    assert pr.index == 4
    assert verify_proof(pr.leaf, pr.siblings, from_hex(block.root_hex), keccak256)

    missing = prove_transaction(db, block, txh(1000))
    assert not missing.included
    assert missing.siblings == ()


def test_prove_uses_block_hash_alg(db):
    hashes = [txh(i) for i in range(4)]
    publish_root(db, 13, hashes, "sha256")
    db.commit()
    block = get_block(db, 13)
    pr = prove_transaction(db, block, hashes[2])
    assert pr.leaf == tx_leaf(hashes[2], sha256)
    assert verify_proof(pr.leaf, pr.siblings, from_hex(block.root_hex), sha256)


def test_get_block_missing(db):
    assert get_block(db, 404) is None
    assert load_tx_hashes(db, 404) == []
