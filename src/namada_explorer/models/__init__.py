"""Pydantic models shared by the store, the pipeline and the API."""

from namada_explorer.models.block import (
    BlockHeader,
    BlockId,
    BlockInfo,
    BlockInfoWithEpoch,
    BlockRow,
    LastBlock,
    LastCommit,
    LatestBlock,
    LatestBlocks,
    PartSetHeader,
)
from namada_explorer.models.tx import (
    DecodedTx,
    TxHashEntry,
    TxKind,
    TxRecord,
    TxSummary,
    TxType,
)

__all__ = [
    "BlockHeader",
    "BlockId",
    "BlockInfo",
    "BlockInfoWithEpoch",
    "BlockRow",
    "DecodedTx",
    "LastBlock",
    "LastCommit",
    "LatestBlock",
    "LatestBlocks",
    "PartSetHeader",
    "TxHashEntry",
    "TxKind",
    "TxRecord",
    "TxSummary",
    "TxType",
]
