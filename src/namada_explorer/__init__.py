"""
Namada Explorer - read-only block query API

Serves persisted Namada blocks by hash, by height, or as the most recent
blocks, with a classified transaction manifest per block and the consensus
epoch for the latest-block queries.
"""

__version__ = "0.1.0"

__all__ = []
