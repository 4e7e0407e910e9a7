from __future__ import annotations

"""
Loader for the wasm checksum table produced by the Namada build
"""
import json
import logging
from pathlib import Path
from typing import Mapping

from namada_explorer.config import ConfigurationError

logger = logging.getLogger(__name__)


def invert_checksums(raw: Mapping[str, str]) -> dict[str, str]:
    """
    Turn ``{"tx_bond.wasm": "tx_bond.<sha256>.wasm"}`` into
    ``{"<sha256>": "tx_bond"}``.
    """
    checksums: dict[str, str] = {}
    for name, filename in raw.items():
        parts = filename.split(".")
        if len(parts) != 3 or parts[2] != "wasm":
            raise ConfigurationError(f"Malformed checksum entry {name!r}: {filename!r}")
        checksums[parts[1].lower()] = name.removesuffix(".wasm")
    return checksums


def load_checksums(path: str | Path) -> dict[str, str]:
    """Read and invert a checksums.json file"""
    path = Path(path).expanduser()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to load checksums from {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Checksums file {path} must contain a JSON object")

    checksums = invert_checksums(raw)
    logger.info("Loaded %d wasm checksums from %s", len(checksums), path)
    return checksums
