from __future__ import annotations

"""
Block assembler - builds a BlockInfo from a stored block and its transaction index
"""
import asyncio
import logging
from typing import Awaitable, Iterable, TypeVar

from namada_explorer.models.block import BlockInfo, BlockRow
from namada_explorer.models.tx import TxHashEntry, TxSummary
from namada_explorer.services.classifier import TxClassifier
from namada_explorer.services.interfaces import BlockStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TX_FANOUT = 8


async def gather_ordered(coros: Iterable[Awaitable[T]]) -> list[T]:
    """
    Run ``coros`` concurrently and return their results in submission order.
    When one raises, the others are cancelled before the error propagates.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class BlockAssembler:
    """
    Classifies every transaction of a block, at most ``fanout`` at a time,
    and returns them in the order the index stores them.
    """

    def __init__(self, store: BlockStore, classifier: TxClassifier, fanout: int = DEFAULT_TX_FANOUT):
        if fanout < 1:
            raise ValueError("fanout must be at least 1")
        self.store = store
        self.classifier = classifier
        self.fanout = fanout

    async def assemble(self, row: BlockRow, semaphore: asyncio.Semaphore | None = None) -> BlockInfo:
        """
        Every store read made here holds ``semaphore``. Pass one to share the
        bound across several blocks of the same request.
        """
        semaphore = semaphore or self.new_semaphore()
        async with semaphore:
            entries = await self.store.fetch_tx_hash_entries(row.block_id)
        summaries = await self._classify_all(entries, semaphore)

        tx_hashes = [summary for summary in summaries if summary is not None]
        if len(tx_hashes) != len(entries):
            logger.info(
                "Block %s: %d of %d indexed transactions not stored yet",
                row.header.height,
                len(entries) - len(tx_hashes),
                len(entries),
            )

        return BlockInfo(
            block_id=row.block_id,
            header=row.header,
            last_commit=row.last_commit,
            tx_hashes=tx_hashes,
        )

    async def assemble_id(self, block_id: bytes) -> BlockInfo | None:
        """Fetch the block stored under ``block_id`` and assemble it"""
        row = await self.store.fetch_block_by_id(block_id)
        if row is None:
            return None
        return await self.assemble(row)

    def new_semaphore(self) -> asyncio.Semaphore:
        return asyncio.Semaphore(self.fanout)

    async def _classify_all(
        self, entries: list[TxHashEntry], semaphore: asyncio.Semaphore
    ) -> list[TxSummary | None]:
        if not entries:
            return []

        async def _classify(entry: TxHashEntry) -> TxSummary | None:
            async with semaphore:
                return await self.classifier.classify(entry)

        return await gather_ordered(_classify(entry) for entry in entries)
