from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from txproof.crypto import Hasher, digest_size, keccak256
from txproof.util import from_hex, to_hex

# side of the sibling relative to the running hash
LEFT = "L"
RIGHT = "R"


class EmptyInput(ValueError):
    pass


class MalformedProof(ValueError):
    pass


class ProofStep(NamedTuple):
    side: str
    sibling: bytes

    def to_wire(self) -> List[str]:
        return [self.side, to_hex(self.sibling)]


@dataclass(frozen=True)
class MerkleProof:
    leaf: bytes
    root: bytes
    siblings: Tuple[ProofStep, ...] = ()
    index: Optional[int] = None  # None: target not among the leaves

    @property
    def included(self) -> bool:
        return self.index is not None

    def __iter__(self) -> Iterator:
        # unpacks as (root, siblings)
        yield self.root
        yield self.siblings


def _h(hasher: Hasher, left: bytes, right: bytes) -> bytes:
    return hasher(left + right)


class MerkleTree:
    """Binary Merkle tree over an ordered sequence of leaf digests.

    Adjacent nodes are paired left to right and hashed as hasher(left || right).
    An unpaired last node is carried forward to the next layer unchanged,
    so it contributes no proof step at that layer.
    """

    def __init__(self, leaves: Sequence[bytes], hasher: Hasher = keccak256):
        if not leaves:
            raise EmptyInput("cannot build a merkle tree from zero leaves")
        width = digest_size(hasher)
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != width:
                raise ValueError(f"leaf {i} is not a {width}-byte digest")
        self.hasher = hasher
        level: Tuple[bytes, ...] = tuple(bytes(x) for x in leaves)
        layers = [level]
        while len(level) > 1:
            nxt = [_h(hasher, level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
            if len(level) % 2 == 1:
                nxt.append(level[-1])
            level = tuple(nxt)
            layers.append(level)
        self.layers: Tuple[Tuple[bytes, ...], ...] = tuple(layers)

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    @property
    def leaf_count(self) -> int:
        return len(self.layers[0])

    @property
    def depth(self) -> int:
        return len(self.layers) - 1

    def index_of(self, target: bytes) -> Optional[int]:
        # first occurrence wins for duplicate leaves
        try:
            return self.layers[0].index(target)
        except ValueError:
            return None

    def proof_at(self, index: int) -> MerkleProof:
        if index < 0 or index >= self.leaf_count:
            raise IndexError(f"leaf index {index} out of range for {self.leaf_count} leaves")
        siblings: List[ProofStep] = []
        idx = index
        for layer in self.layers[:-1]:
            if idx % 2 == 1:
                siblings.append(ProofStep(LEFT, layer[idx - 1]))
            elif idx + 1 < len(layer):
                siblings.append(ProofStep(RIGHT, layer[idx + 1]))
            idx //= 2
        return MerkleProof(leaf=self.layers[0][index], root=self.root, siblings=tuple(siblings), index=index)

    def proof_for(self, target: bytes) -> MerkleProof:
        idx = self.index_of(target)
        if idx is None:
            return MerkleProof(leaf=target, root=self.root)
        return self.proof_at(idx)


def build_merkle(leaves: Sequence[bytes], hasher: Hasher = keccak256) -> tuple[bytes, tuple[tuple[bytes, ...], ...]]:
    tree = MerkleTree(leaves, hasher)
    return tree.root, tree.layers


def build_root(leaves: Sequence[bytes], hasher: Hasher = keccak256) -> bytes:
    return MerkleTree(leaves, hasher).root


def prove(leaves: Sequence[bytes], target: bytes, hasher: Hasher = keccak256) -> MerkleProof:
    return MerkleTree(leaves, hasher).proof_for(target)


def verify_proof(leaf: bytes, proof: Sequence[Tuple[str, bytes]], root: bytes, hasher: Hasher = keccak256) -> bool:
    """Recompute the root from leaf and proof steps.

    Malformed material (wrong digest width, unknown side, non-bytes sibling)
    verifies as False rather than raising.
    """
    width = digest_size(hasher)
    if not isinstance(leaf, (bytes, bytearray)) or not isinstance(root, (bytes, bytearray)):
        return False
    if len(leaf) != width or len(root) != width:
        return False
    cur = bytes(leaf)
    for step in proof:
        try:
            side, sib = step
        except (TypeError, ValueError):
            return False
        if not isinstance(sib, (bytes, bytearray)) or len(sib) != width:
            return False
        if side == LEFT:
            cur = _h(hasher, bytes(sib), cur)
        elif side == RIGHT:
            cur = _h(hasher, cur, bytes(sib))
        else:
            return False
    return cur == bytes(root)


def parse_proof(raw: Sequence[Sequence[str]], width: int = 32) -> Tuple[ProofStep, ...]:
    """Decode [[side, hex], ...] into proof steps, raising MalformedProof."""
    steps: List[ProofStep] = []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise MalformedProof("proof must be a list of [side, hash] steps")
    for n, item in enumerate(raw):
        try:
            side, h = item
        except (TypeError, ValueError):
            raise MalformedProof(f"step {n}: expected [side, hash]") from None
        if side not in (LEFT, RIGHT):
            raise MalformedProof(f"step {n}: side must be {LEFT!r} or {RIGHT!r}")
        try:
            sib = from_hex(h)
        except (TypeError, ValueError):
            raise MalformedProof(f"step {n}: sibling is not hex") from None
        if len(sib) != width:
            raise MalformedProof(f"step {n}: sibling is {len(sib)} bytes, expected {width}")
        steps.append(ProofStep(side, sib))
    return tuple(steps)
