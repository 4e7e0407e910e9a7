"""
Test configuration and fixtures
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"

sys.path.insert(0, str(src_path))

import pytest

from namada_explorer.errors import OracleError, StoreError
from namada_explorer.models.block import BlockHeader, BlockRow, LastCommit
from namada_explorer.models.tx import TxHashEntry, TxRecord, TxType

BOND_CODE = bytes.fromhex("aa" * 32)
TRANSFER_CODE = bytes.fromhex("bb" * 32)
REDELEGATE_CODE = bytes.fromhex("cc" * 32)
UNKNOWN_CODE = bytes.fromhex("dd" * 32)

CHECKSUMS = {
    BOND_CODE.hex(): "tx_bond",
    TRANSFER_CODE.hex(): "tx_transfer",
    REDELEGATE_CODE.hex(): "tx_redelegate",
}


def make_block(height: int, block_id: bytes | None = None) -> BlockRow:
    block_id = block_id or height.to_bytes(32, "big")
    return BlockRow(
        block_id=block_id,
        header=BlockHeader(
            chain_id="namada-test.0123456789abcdef",
            height=height,
            time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            proposer_address=bytes.fromhex("01" * 20),
            app_hash=bytes.fromhex("02" * 32),
        ),
        last_commit=LastCommit(height=max(height - 1, 0), round=0),
    )


def tx_hash(n: int) -> bytes:
    return n.to_bytes(32, "big")


class FakeStore:
    """In-memory BlockStore that records which transaction records were read"""

    def __init__(self):
        self.blocks: list[BlockRow] = []
        self.entries: dict[bytes, list[TxHashEntry]] = {}
        self.records: dict[bytes, TxRecord] = {}
        self.record_reads: list[bytes] = []
        self.fail_with: Exception | None = None

    def add_block(self, block: BlockRow, txs: list[tuple[bytes, TxType, bytes | None]] = ()) -> BlockRow:
        """Store a block with ``(hash, tx_type, code)`` transactions; code None means no record"""
        self.blocks.append(block)
        self.entries[block.block_id] = []
        for hash_, tx_type, code in txs:
            self.entries[block.block_id].append(TxHashEntry(hash=hash_, tx_type=tx_type))
            if code is not None:
                self.records[hash_] = TxRecord(
                    hash=hash_, block_id=block.block_id, tx_type=tx_type, code=code, data=b"\x00"
                )
        return block

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def fetch_block_by_hash(self, block_hash):
        self._check()
        return next((b for b in self.blocks if b.block_id == block_hash), None)

    fetch_block_by_id = fetch_block_by_hash

    async def fetch_block_by_height(self, height):
        self._check()
        return next((b for b in self.blocks if b.header.height == height), None)

    async def fetch_latest_block(self):
        self._check()
        if not self.blocks:
            raise StoreError("No blocks have been indexed yet")
        return max(self.blocks, key=lambda b: b.header.height)

    async def fetch_latest_blocks(self, count, offset=None):
        self._check()
        ordered = sorted(self.blocks, key=lambda b: b.header.height, reverse=True)
        start = offset or 0
        return ordered[start:start + count]

    async def fetch_tx_hash_entries(self, block_id):
        self._check()
        return list(self.entries.get(block_id, []))

    async def fetch_tx_record(self, hash_):
        self._check()
        self.record_reads.append(hash_)
        return self.records.get(hash_)


class FakeOracle:
    """Epoch = height // epoch_length; can be told to fail at a height"""

    def __init__(self, epoch_length: int = 10):
        self.epoch_length = epoch_length
        self.calls: list[int] = []
        self.fail_at: int | None = None

    async def epoch_at_height(self, height):
        self.calls.append(height)
        if self.fail_at is not None and height == self.fail_at:
            raise OracleError(f"Node unreachable at height {height}")
        return height // self.epoch_length


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def checksums():
    return dict(CHECKSUMS)
