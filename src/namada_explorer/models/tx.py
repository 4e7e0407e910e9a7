from __future__ import annotations

"""
Transaction models for the Namada explorer
"""
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer


def _from_hex(value: Any) -> Any:
    # hashes travel as hex text in responses and are parsed back on re-validation
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


HexBytes = Annotated[
    bytes,
    BeforeValidator(_from_hex),
    PlainSerializer(lambda value: value.hex().upper(), return_type=str),
]


class TxType(str, Enum):
    """Raw kind tag stored in the transaction-hash index"""
    WRAPPER = "Wrapper"
    DECRYPTED = "Decrypted"


class TxKind(str, Enum):
    """Decoded transaction variants"""
    TRANSFER = "Transfer"
    BOND = "Bond"
    REVEAL_PK = "RevealPK"
    VOTE_PROPOSAL = "VoteProposal"
    BECOME_VALIDATOR = "BecomeValidator"
    INIT_VALIDATOR = "InitValidator"
    UNBOND = "Unbond"
    WITHDRAW = "Withdraw"
    INIT_ACCOUNT = "InitAccount"
    UPDATE_ACCOUNT = "UpdateAccount"
    RESIGN_STEWARD = "ResignSteward"
    UPDATE_STEWARD_COMMISSION = "UpdateStewardCommission"
    ETH_POOL_BRIDGE = "EthPoolBridge"
    IBC = "Ibc"
    CONSENSUS_KEY_CHANGE = "ConsensusKeyChange"
    COMMISSION_CHANGE = "CommissionChange"
    META_DATA_CHANGE = "MetaDataChange"
    CLAIM_REWARDS = "ClaimRewards"
    DEACTIVATE_VALIDATOR = "DeactivateValidator"
    REACTIVATE_VALIDATOR = "ReactivateValidator"
    UNJAIL_VALIDATOR = "UnjailValidator"
    INIT_PROPOSAL = "InitProposal"


class TxHashEntry(BaseModel):
    """One row of the per-block transaction-hash index"""
    model_config = ConfigDict(frozen=True)

    hash: HexBytes
    tx_type: TxType


class TxRecord(BaseModel):
    """Full persisted transaction"""
    hash: HexBytes
    block_id: HexBytes
    tx_type: TxType
    code: HexBytes | None = None
    data: HexBytes | None = None


class DecodedTx(BaseModel):
    """Result of decoding a TxRecord; kind is None for unrecognized code"""
    kind: TxKind | None = None
    code_name: str | None = None
    data: Any = None


class TxSummary(BaseModel):
    """Classified form of a TxHashEntry as returned to clients"""
    tx_type: str
    hash_id: HexBytes

