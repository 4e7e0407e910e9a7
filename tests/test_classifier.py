"""
Unit tests for TxClassifier.

Coverage targets:
- Wrapper entries never touch the store
- Decoded variants map to their labels
- Decode failures and unrecognized code fall back to "Decrypted"
- Missing records are dropped
"""

import pytest

from conftest import BOND_CODE, REDELEGATE_CODE, TRANSFER_CODE, UNKNOWN_CODE, make_block, tx_hash
from namada_explorer.errors import DecodeError
from namada_explorer.models.tx import TxHashEntry, TxKind, TxType
from namada_explorer.services.classifier import TX_KIND_LABELS, TxClassifier, label_for
from namada_explorer.services.decoder import TxDecoder


def test_every_kind_has_a_label():
    assert set(TX_KIND_LABELS) == set(TxKind)


def test_labels_are_the_variant_names():
    for kind, label in TX_KIND_LABELS.items():
        assert label == kind.value


def test_unrecognized_kind_labels_as_decrypted():
    assert label_for(None) == "Decrypted"


@pytest.mark.asyncio
async def test_wrapper_never_fetches_record(store, checksums):
    classifier = TxClassifier(store, checksums)
    entry = TxHashEntry(hash=tx_hash(1), tx_type=TxType.WRAPPER)

    summary = await classifier.classify(entry)

    assert summary.tx_type == "Wrapper"
    assert summary.hash_id == tx_hash(1)
    assert store.record_reads == []


@pytest.mark.asyncio
async def test_wrapper_label_ignores_stored_content(store, checksums):
    store.add_block(make_block(1), [(tx_hash(1), TxType.WRAPPER, BOND_CODE)])
    classifier = TxClassifier(store, checksums)

    summary = await classifier.classify(TxHashEntry(hash=tx_hash(1), tx_type=TxType.WRAPPER))

    assert summary.tx_type == "Wrapper"
    assert store.record_reads == []


@pytest.mark.asyncio
@pytest.mark.parametrize("code, label", [(BOND_CODE, "Bond"), (TRANSFER_CODE, "Transfer")])
async def test_decrypted_entry_gets_variant_label(store, checksums, code, label):
    store.add_block(make_block(1), [(tx_hash(7), TxType.DECRYPTED, code)])
    classifier = TxClassifier(store, checksums)

    summary = await classifier.classify(TxHashEntry(hash=tx_hash(7), tx_type=TxType.DECRYPTED))

    assert summary.tx_type == label
    assert store.record_reads == [tx_hash(7)]


@pytest.mark.asyncio
async def test_known_but_unclassified_wasm_labels_as_decrypted(store, checksums):
    store.add_block(make_block(1), [(tx_hash(2), TxType.DECRYPTED, REDELEGATE_CODE)])
    classifier = TxClassifier(store, checksums)

    summary = await classifier.classify(TxHashEntry(hash=tx_hash(2), tx_type=TxType.DECRYPTED))

    assert summary.tx_type == "Decrypted"
    assert classifier.decode_failures == 0


@pytest.mark.asyncio
async def test_decode_failure_falls_back_and_is_counted(store, checksums):
    store.add_block(make_block(1), [(tx_hash(3), TxType.DECRYPTED, UNKNOWN_CODE)])
    classifier = TxClassifier(store, checksums)

    summary = await classifier.classify(TxHashEntry(hash=tx_hash(3), tx_type=TxType.DECRYPTED))

    assert summary.tx_type == "Decrypted"
    assert summary.hash_id == tx_hash(3)
    assert classifier.decode_failures == 1


@pytest.mark.asyncio
async def test_missing_record_is_dropped(store, checksums):
    store.add_block(make_block(1), [(tx_hash(4), TxType.DECRYPTED, None)])
    classifier = TxClassifier(store, checksums)

    assert await classifier.classify(TxHashEntry(hash=tx_hash(4), tx_type=TxType.DECRYPTED)) is None


@pytest.mark.asyncio
async def test_injected_decoder_is_used(store, checksums):
    class ExplodingDecoder(TxDecoder):
        def decode(self, record, checksums):
            raise DecodeError("corrupt payload")

    store.add_block(make_block(1), [(tx_hash(5), TxType.DECRYPTED, BOND_CODE)])
    classifier = TxClassifier(store, checksums, decoder=ExplodingDecoder())

    summary = await classifier.classify(TxHashEntry(hash=tx_hash(5), tx_type=TxType.DECRYPTED))

    assert summary.tx_type == "Decrypted"
