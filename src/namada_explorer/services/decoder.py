from __future__ import annotations

"""
Transaction decoder - resolves the wasm code a transaction runs to its variant
"""
from typing import Mapping

from namada_explorer.errors import DecodeError
from namada_explorer.models.tx import DecodedTx, TxKind, TxRecord

# wasm transaction name -> decoded variant
WASM_TX_KINDS: dict[str, TxKind] = {
    "tx_transfer": TxKind.TRANSFER,
    "tx_bond": TxKind.BOND,
    "tx_reveal_pk": TxKind.REVEAL_PK,
    "tx_vote_proposal": TxKind.VOTE_PROPOSAL,
    "tx_become_validator": TxKind.BECOME_VALIDATOR,
    "tx_init_validator": TxKind.INIT_VALIDATOR,
    "tx_unbond": TxKind.UNBOND,
    "tx_withdraw": TxKind.WITHDRAW,
    "tx_init_account": TxKind.INIT_ACCOUNT,
    "tx_update_account": TxKind.UPDATE_ACCOUNT,
    "tx_resign_steward": TxKind.RESIGN_STEWARD,
    "tx_update_steward_commission": TxKind.UPDATE_STEWARD_COMMISSION,
    "tx_bridge_pool": TxKind.ETH_POOL_BRIDGE,
    "tx_ibc": TxKind.IBC,
    "tx_change_consensus_key": TxKind.CONSENSUS_KEY_CHANGE,
    "tx_change_validator_commission": TxKind.COMMISSION_CHANGE,
    "tx_change_validator_metadata": TxKind.META_DATA_CHANGE,
    "tx_claim_rewards": TxKind.CLAIM_REWARDS,
    "tx_deactivate_validator": TxKind.DEACTIVATE_VALIDATOR,
    "tx_reactivate_validator": TxKind.REACTIVATE_VALIDATOR,
    "tx_unjail_validator": TxKind.UNJAIL_VALIDATOR,
    "tx_init_proposal": TxKind.INIT_PROPOSAL,
}


class TxDecoder:
    """Decodes persisted transaction records into DecodedTx variants"""

    def __init__(self, wasm_kinds: Mapping[str, TxKind] | None = None):
        self.wasm_kinds = dict(WASM_TX_KINDS if wasm_kinds is None else wasm_kinds)

    def decode(self, record: TxRecord, checksums: Mapping[str, str]) -> DecodedTx:
        """
        Resolve ``record.code`` through the checksum table.

        Raises DecodeError when the record carries no code hash or the hash
        is not in the table. A known wasm that is not a classified variant
        decodes to ``DecodedTx(kind=None)``.
        """
        if not record.code:
            raise DecodeError(f"Transaction {record.hash.hex()} has no code hash")

        code_hash = record.code.hex()
        code_name = checksums.get(code_hash)
        if code_name is None:
            raise DecodeError(f"Unknown code hash {code_hash} for transaction {record.hash.hex()}")

        return DecodedTx(
            kind=self.wasm_kinds.get(code_name),
            code_name=code_name,
            data=record.data,
        )
