from __future__ import annotations

"""
Block queries - by hash, by height, and the most recent blocks with their epoch
"""
import asyncio
import logging

from namada_explorer.errors import ClientInputError, ErrorCode
from namada_explorer.models.block import BlockInfo, BlockInfoWithEpoch, BlockRow, LastBlock, LatestBlocks
from namada_explorer.services.assembler import BlockAssembler, gather_ordered
from namada_explorer.services.interfaces import BlockStore, EpochOracle

logger = logging.getLogger(__name__)

# heights are stored as BIGINT
MAX_HEIGHT = 2**63 - 1


def parse_block_hash(block_hash: str) -> bytes:
    """Decode a hex block hash, optionally ``0x`` prefixed"""
    text = block_hash.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text:
        raise ClientInputError("Block hash is empty", code=ErrorCode.INVALID_HASH)
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ClientInputError(f"Block hash is not valid hex: {block_hash!r}", code=ErrorCode.INVALID_HASH) from exc


class LatestBlocksQuery:
    """
    The three ways to read blocks.

    ``by_hash`` and ``by_height`` return a BlockInfo or None when the block
    is not stored. ``latest`` annotates every block with its epoch and
    returns LastBlock when no count is given, LatestBlocks otherwise.
    Holds no per-request state; one instance serves every request.
    """

    def __init__(self, store: BlockStore, oracle: EpochOracle, assembler: BlockAssembler):
        self.store = store
        self.oracle = oracle
        self.assembler = assembler

    async def by_hash(self, block_hash: str | bytes) -> BlockInfo | None:
        if isinstance(block_hash, str):
            block_hash = parse_block_hash(block_hash)

        row = await self.store.fetch_block_by_hash(block_hash)
        if row is None:
            return None
        return await self.assembler.assemble(row)

    async def by_height(self, height: int) -> BlockInfo | None:
        if height < 0:
            raise ClientInputError(f"Block height must be non-negative, got {height}")
        if height > MAX_HEIGHT:
            raise ClientInputError(f"Block height must be at most {MAX_HEIGHT}, got {height}")

        row = await self.store.fetch_block_by_height(height)
        if row is None:
            return None
        return await self.assembler.assemble(row)

    async def latest(self, count: int | None = None, offset: int | None = None) -> LastBlock | LatestBlocks:
        if count is None:
            row = await self.store.fetch_latest_block()
            return LastBlock(block=await self._enrich(row))

        if count < 0:
            raise ClientInputError(f"num must be non-negative, got {count}")
        if offset is not None and offset < 0:
            raise ClientInputError(f"offset must be non-negative, got {offset}")

        rows = await self.store.fetch_latest_blocks(count, offset or 0)
        if not rows:
            return LatestBlocks(blocks=[])

        # one classification bound for the whole page, and at most fanout
        # blocks in flight at once
        tx_semaphore = self.assembler.new_semaphore()
        block_semaphore = asyncio.Semaphore(self.assembler.fanout)

        async def _bounded(row: BlockRow) -> BlockInfoWithEpoch:
            async with block_semaphore:
                return await self._enrich(row, tx_semaphore)

        blocks = await gather_ordered(_bounded(row) for row in rows)
        return LatestBlocks(blocks=blocks)

    async def _enrich(self, row: BlockRow, semaphore: asyncio.Semaphore | None = None) -> BlockInfoWithEpoch:
        block = await self.assembler.assemble(row, semaphore)
        epoch = await self.oracle.epoch_at_height(block.header.height)
        return BlockInfoWithEpoch.from_block(block, epoch)
