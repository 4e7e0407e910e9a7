"""
Collaborator Protocol Interfaces - what the block pipeline needs from the outside.

The pipeline depends on these protocols rather than on the asyncpg store or
the httpx oracle directly, so tests can pass in-memory fakes:

    query = LatestBlocksQuery(store, oracle, classifier)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from namada_explorer.models.block import BlockRow
    from namada_explorer.models.tx import DecodedTx, TxHashEntry, TxRecord


@runtime_checkable
class BlockStore(Protocol):
    """
    Read access to persisted blocks, the transaction-hash index and raw
    transaction records. Failures surface as StoreError.
    """

    async def fetch_block_by_hash(self, block_hash: bytes) -> "BlockRow | None": ...

    async def fetch_block_by_id(self, block_id: bytes) -> "BlockRow | None": ...

    async def fetch_block_by_height(self, height: int) -> "BlockRow | None": ...

    async def fetch_latest_block(self) -> "BlockRow": ...

    async def fetch_latest_blocks(self, count: int, offset: int | None = None) -> list["BlockRow"]: ...

    async def fetch_tx_hash_entries(self, block_id: bytes) -> list["TxHashEntry"]: ...

    async def fetch_tx_record(self, tx_hash: bytes) -> "TxRecord | None": ...


@runtime_checkable
class EpochOracle(Protocol):
    """Live node query for the epoch active at a height. Raises OracleError."""

    async def epoch_at_height(self, height: int) -> int: ...


@runtime_checkable
class Decoder(Protocol):
    """Raises DecodeError when the record cannot be decoded."""

    def decode(self, record: "TxRecord", checksums: Mapping[str, str]) -> "DecodedTx": ...
