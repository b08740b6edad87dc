import hashlib
import os
import tempfile

# settings are read at import time; clean_db drops tables, so never inherit DATABASE_URL
TEST_DB_DIR = tempfile.mkdtemp(prefix="txproof-")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_DIR}/test.db"
os.environ["DEFAULT_RPS_LIMIT"] = "0"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

from app import app
from txproof import db as dbmod
from txproof.models import Base
from txproof.rpc import EmptyBlock, get_block_source


def txh(i: int) -> str:
    return "0x" + hashlib.sha256(f"tx-{i}".encode()).hexdigest()


class FakeBlockSource:
    def __init__(self, blocks: dict):
        self.blocks = blocks
        self.calls = []

    def transaction_hashes(self, block_number: int) -> list[str]:
        self.calls.append(block_number)
        v = self.blocks.get(block_number)
        if isinstance(v, Exception):
            raise v
        if not v:
            raise EmptyBlock("No transactions found in the specified block.")
        return list(v)


@pytest.fixture()
def clean_db():
    eng = dbmod.engine()
    Base.metadata.drop_all(bind=eng)
    Base.metadata.create_all(bind=eng)
    yield eng


@pytest.fixture()
def db(clean_db):
    s = dbmod.SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def block_source():
    return FakeBlockSource({
        100: [txh(i) for i in range(4)],
        101: [txh(i) for i in range(10, 15)],
        102: [txh(99)],
    })


@pytest.fixture()
def client(clean_db, block_source):
    app.dependency_overrides[get_block_source] = lambda: block_source
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
