"""Block retrieval and enrichment pipeline."""

from namada_explorer.services.assembler import BlockAssembler
from namada_explorer.services.block_query import LatestBlocksQuery, parse_block_hash
from namada_explorer.services.checksums import load_checksums
from namada_explorer.services.classifier import TX_KIND_LABELS, TxClassifier
from namada_explorer.services.decoder import TxDecoder
from namada_explorer.services.epoch import EpochOracle

__all__ = [
    "BlockAssembler",
    "EpochOracle",
    "LatestBlocksQuery",
    "TX_KIND_LABELS",
    "TxClassifier",
    "TxDecoder",
    "load_checksums",
    "parse_block_hash",
]
