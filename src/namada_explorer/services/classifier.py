from __future__ import annotations

"""
Transaction classifier - labels the entries of a block's transaction-hash index
"""
import logging
from typing import Mapping

from namada_explorer.errors import DecodeError
from namada_explorer.models.tx import TxHashEntry, TxKind, TxSummary, TxType
from namada_explorer.services.decoder import TxDecoder
from namada_explorer.services.interfaces import BlockStore, Decoder

logger = logging.getLogger(__name__)

WRAPPER_LABEL = "Wrapper"
DECRYPTED_LABEL = "Decrypted"

TX_KIND_LABELS: dict[TxKind, str] = {
    TxKind.TRANSFER: "Transfer",
    TxKind.BOND: "Bond",
    TxKind.REVEAL_PK: "RevealPK",
    TxKind.VOTE_PROPOSAL: "VoteProposal",
    TxKind.BECOME_VALIDATOR: "BecomeValidator",
    TxKind.INIT_VALIDATOR: "InitValidator",
    TxKind.UNBOND: "Unbond",
    TxKind.WITHDRAW: "Withdraw",
    TxKind.INIT_ACCOUNT: "InitAccount",
    TxKind.UPDATE_ACCOUNT: "UpdateAccount",
    TxKind.RESIGN_STEWARD: "ResignSteward",
    TxKind.UPDATE_STEWARD_COMMISSION: "UpdateStewardCommission",
    TxKind.ETH_POOL_BRIDGE: "EthPoolBridge",
    TxKind.IBC: "Ibc",
    TxKind.CONSENSUS_KEY_CHANGE: "ConsensusKeyChange",
    TxKind.COMMISSION_CHANGE: "CommissionChange",
    TxKind.META_DATA_CHANGE: "MetaDataChange",
    TxKind.CLAIM_REWARDS: "ClaimRewards",
    TxKind.DEACTIVATE_VALIDATOR: "DeactivateValidator",
    TxKind.REACTIVATE_VALIDATOR: "ReactivateValidator",
    TxKind.UNJAIL_VALIDATOR: "UnjailValidator",
    TxKind.INIT_PROPOSAL: "InitProposal",
}


def label_for(kind: TxKind | None) -> str:
    """Descriptive label of a decoded variant; unrecognized -> Decrypted"""
    if kind is None:
        return DECRYPTED_LABEL
    return TX_KIND_LABELS.get(kind, DECRYPTED_LABEL)


class TxClassifier:
    """
    Turns TxHashEntry rows into TxSummary values.

    Wrapper entries are labelled without touching the store. Decrypted
    entries are fetched and decoded; a record missing from the store yields
    None so the caller can omit it, and a decode failure falls back to the
    generic "Decrypted" label.
    """

    def __init__(
        self,
        store: BlockStore,
        checksums: Mapping[str, str],
        decoder: Decoder | None = None,
    ):
        self.store = store
        self.checksums = checksums
        self.decoder = decoder or TxDecoder()
        self.decode_failures = 0

    async def classify(self, entry: TxHashEntry) -> TxSummary | None:
        if entry.tx_type == TxType.WRAPPER:
            return TxSummary(tx_type=WRAPPER_LABEL, hash_id=entry.hash)

        record = await self.store.fetch_tx_record(entry.hash)
        if record is None:
            logger.debug("Transaction %s is indexed but not stored yet", entry.hash.hex())
            return None

        try:
            decoded = self.decoder.decode(record, self.checksums)
        except DecodeError as exc:
            self.decode_failures += 1
            logger.debug("Falling back to %s label: %s", DECRYPTED_LABEL, exc)
            return TxSummary(tx_type=DECRYPTED_LABEL, hash_id=entry.hash)

        return TxSummary(tx_type=label_for(decoded.kind), hash_id=entry.hash)
