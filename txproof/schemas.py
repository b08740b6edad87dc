from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Literal


class BlockOut(BaseModel):
    block_number: int
    root: str
    leaf_count: int
    hash_alg: str
    published_at: str
    transactions: List[str]


class ProofRequest(BaseModel):
    block_number: int = Field(ge=0)
    tx_hash: str = Field(min_length=1, max_length=80)


class ProofOut(BaseModel):
    block_number: int
    tx_hash: str
    leaf: str
    root: str
    leaf_index: Optional[int] = None
    siblings: List[List[str]]  # [side, hash]
    verified: bool
    status: Literal["verified", "rejected", "not_included", "malformed_proof"]
    message: str


class VerifyRequest(BaseModel):
    leaf: Optional[str] = Field(default=None, max_length=130)
    tx_hash: Optional[str] = Field(default=None, max_length=80)
    siblings: List[List[str]] = Field(default_factory=list, max_length=256)
    root: Optional[str] = Field(default=None, max_length=130)
    block_number: Optional[int] = Field(default=None, ge=0)
    hash_alg: Optional[Literal["keccak256", "sha256"]] = None

    @model_validator(mode="after")
    def _one_of_each(self):
        if (self.leaf is None) == (self.tx_hash is None):
            raise ValueError("provide exactly one of leaf or tx_hash")
        if (self.root is None) == (self.block_number is None):
            raise ValueError("provide exactly one of root or block_number")
        return self


class VerifyResult(BaseModel):
    verified: bool
    status: Literal["verified", "rejected", "not_included", "malformed_proof"]
    message: str
    leaf: Optional[str] = None
    root: Optional[str] = None
