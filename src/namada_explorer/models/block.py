from __future__ import annotations

"""
Block models for the Namada explorer
"""
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from namada_explorer.models.tx import HexBytes, TxSummary


class PartSetHeader(BaseModel):
    total: int = 0
    hash: HexBytes | None = None


class BlockId(BaseModel):
    hash: HexBytes | None = None
    parts: PartSetHeader = Field(default_factory=PartSetHeader)


class BlockHeader(BaseModel):
    """CometBFT block header, copied verbatim from the store"""
    version_app: int | None = None
    version_block: int | None = None
    chain_id: str
    height: int = Field(ge=0)
    time: datetime | str
    last_block_id: BlockId = Field(default_factory=BlockId)
    last_commit_hash: HexBytes | None = None
    data_hash: HexBytes | None = None
    validators_hash: HexBytes | None = None
    next_validators_hash: HexBytes | None = None
    consensus_hash: HexBytes | None = None
    app_hash: HexBytes | None = None
    last_results_hash: HexBytes | None = None
    evidence_hash: HexBytes | None = None
    proposer_address: HexBytes | None = None


class LastCommit(BaseModel):
    height: int
    round: int
    block_id: BlockId = Field(default_factory=BlockId)


class BlockRow(BaseModel):
    """Persisted block as read from the store"""
    block_id: HexBytes
    header: BlockHeader
    last_commit: LastCommit | None = None


class BlockInfo(BaseModel):
    """Block with its classified transaction manifest"""
    block_id: HexBytes
    header: BlockHeader
    last_commit: LastCommit | None = None
    tx_hashes: list[TxSummary] = Field(default_factory=list)


class BlockInfoWithEpoch(BlockInfo):
    """BlockInfo annotated with the epoch active at its height"""
    epoch: int = Field(ge=0)

    @classmethod
    def from_block(cls, block: BlockInfo, epoch: int) -> "BlockInfoWithEpoch":
        return cls(
            block_id=block.block_id,
            header=block.header,
            last_commit=block.last_commit,
            tx_hashes=block.tx_hashes,
            epoch=epoch,
        )


class LastBlock(BaseModel):
    """Answer to a latest-block query without a count"""
    kind: Literal["last_block"] = "last_block"
    block: BlockInfoWithEpoch


class LatestBlocks(BaseModel):
    """Answer to a latest-block query with a count, most recent first"""
    kind: Literal["latest_blocks"] = "latest_blocks"
    blocks: list[BlockInfoWithEpoch] = Field(default_factory=list)


LatestBlock = Annotated[Union[LastBlock, LatestBlocks], Field(discriminator="kind")]
