from __future__ import annotations

"""
Database connection management and block store queries for the Namada explorer
"""
import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator

import asyncpg
from pydantic import ValidationError

from namada_explorer.errors import StoreError
from namada_explorer.models.block import BlockHeader, BlockId, BlockRow, LastCommit, PartSetHeader
from namada_explorer.models.tx import TxHashEntry, TxRecord

logger = logging.getLogger(__name__)

BLOCK_COLUMNS = """
    block_id,
    header_version_app,
    header_version_block,
    header_chain_id,
    header_height,
    header_time,
    header_last_block_id_hash,
    header_last_block_id_parts_header_total,
    header_last_block_id_parts_header_hash,
    header_last_commit_hash,
    header_data_hash,
    header_validators_hash,
    header_next_validators_hash,
    header_consensus_hash,
    header_app_hash,
    header_last_results_hash,
    header_evidence_hash,
    header_proposer_address,
    commit_height,
    commit_round,
    commit_block_id_hash,
    commit_block_id_parts_header_total,
    commit_block_id_parts_header_hash
"""

STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


@contextmanager
def _malformed_rows(table: str) -> Iterator[None]:
    """Stored rows that fail model validation are a store fault, not a client one"""
    try:
        yield
    except ValidationError as e:
        logger.error(f"Malformed {table} row: {e}")
        raise StoreError(f"Malformed {table} row ({e.error_count()} invalid fields)") from e


def row_to_block(row: dict[str, Any]) -> BlockRow:
    """Map a blocks table row onto a BlockRow; raises StoreError if it does not validate"""
    with _malformed_rows("blocks"):
        return _build_block(row)


def _build_block(row: dict[str, Any]) -> BlockRow:
    header = BlockHeader(
        version_app=row.get("header_version_app"),
        version_block=row.get("header_version_block"),
        chain_id=row["header_chain_id"],
        height=row["header_height"],
        time=row["header_time"],
        last_block_id=BlockId(
            hash=row.get("header_last_block_id_hash"),
            parts=PartSetHeader(
                total=row.get("header_last_block_id_parts_header_total") or 0,
                hash=row.get("header_last_block_id_parts_header_hash"),
            ),
        ),
        last_commit_hash=row.get("header_last_commit_hash"),
        data_hash=row.get("header_data_hash"),
        validators_hash=row.get("header_validators_hash"),
        next_validators_hash=row.get("header_next_validators_hash"),
        consensus_hash=row.get("header_consensus_hash"),
        app_hash=row.get("header_app_hash"),
        last_results_hash=row.get("header_last_results_hash"),
        evidence_hash=row.get("header_evidence_hash"),
        proposer_address=row.get("header_proposer_address"),
    )

    last_commit = None
    if row.get("commit_height") is not None:
        last_commit = LastCommit(
            height=row["commit_height"],
            round=row.get("commit_round") or 0,
            block_id=BlockId(
                hash=row.get("commit_block_id_hash"),
                parts=PartSetHeader(
                    total=row.get("commit_block_id_parts_header_total") or 0,
                    hash=row.get("commit_block_id_parts_header_hash"),
                ),
            ),
        )

    return BlockRow(block_id=row["block_id"], header=header, last_commit=last_commit)


class Database:
    """Async PostgreSQL connection manager and read-only block store"""

    def __init__(
        self,
        database_url: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.pool: asyncpg.Pool | None = None

    async def connect(self):
        """Establish database connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                self.database_url,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
            )
            logger.info("Database connection pool created")
        except STORE_ERRORS as e:
            logger.error(f"Failed to connect to database: {e}")
            raise StoreError(f"Failed to connect to database: {e}") from e

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database connection pool closed")

    async def is_connected(self) -> bool:
        """Check if database is connected"""
        if not self.pool:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except STORE_ERRORS:
            return False

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[asyncpg.Connection]:
        if not self.pool:
            raise StoreError("Database is not connected")
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except STORE_ERRORS as e:
            logger.error(f"Database query failed: {e}")
            raise StoreError(f"Database query failed: {e}") from e

    async def fetch_one(self, query: str, *args) -> dict[str, Any] | None:
        """Fetch single row"""
        async with self._connection() as conn:
            row = await conn.fetchrow(query, *args)
            return dict(row) if row else None

    async def fetch_all(self, query: str, *args) -> list[dict[str, Any]]:
        """Fetch multiple rows"""
        async with self._connection() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

    # ------------------------------------------------------------------ blocks
    async def fetch_block_by_hash(self, block_hash: bytes) -> BlockRow | None:
        """Look up a block by its content hash"""
        row = await self.fetch_one(
            f"SELECT {BLOCK_COLUMNS} FROM blocks WHERE block_id = $1;",
            block_hash,
        )
        return row_to_block(row) if row else None

    # The block hash is also the join key of the transaction-hash index.
    fetch_block_by_id = fetch_block_by_hash

    async def fetch_block_by_height(self, height: int) -> BlockRow | None:
        row = await self.fetch_one(
            f"SELECT {BLOCK_COLUMNS} FROM blocks WHERE header_height = $1;",
            height,
        )
        return row_to_block(row) if row else None

    async def fetch_latest_block(self) -> BlockRow:
        """Return the highest stored block; an empty store is an error"""
        row = await self.fetch_one(
            f"SELECT {BLOCK_COLUMNS} FROM blocks ORDER BY header_height DESC LIMIT 1;"
        )
        if row is None:
            raise StoreError("No blocks have been indexed yet")
        return row_to_block(row)

    async def fetch_latest_blocks(self, count: int, offset: int | None = None) -> list[BlockRow]:
        """Return up to ``count`` blocks, most recent first, skipping ``offset``"""
        rows = await self.fetch_all(
            f"SELECT {BLOCK_COLUMNS} FROM blocks ORDER BY header_height DESC LIMIT $1 OFFSET $2;",
            count,
            offset or 0,
        )
        return [row_to_block(row) for row in rows]

    # ------------------------------------------------------------ transactions
    async def fetch_tx_hash_entries(self, block_id: bytes) -> list[TxHashEntry]:
        """Return the transaction-hash index of a block in insertion order"""
        rows = await self.fetch_all(
            "SELECT hash, tx_type FROM tx_hashes WHERE block_id = $1 ORDER BY tx_index ASC;",
            block_id,
        )
        with _malformed_rows("tx_hashes"):
            return [TxHashEntry(hash=row["hash"], tx_type=row["tx_type"]) for row in rows]

    async def fetch_tx_record(self, tx_hash: bytes) -> TxRecord | None:
        row = await self.fetch_one(
            "SELECT hash, block_id, tx_type, code, data FROM transactions WHERE hash = $1;",
            tx_hash,
        )
        if row is None:
            return None
        with _malformed_rows("transactions"):
            return TxRecord(**row)
