"""Tests for direction and net-flow resolution."""

import logging

import pytest

from chaintrack.domain.direction import (
    Direction,
    UtxoChangePolicy,
    compute_utxo_fee,
    outpoint_lookup_from_records,
    resolve_account_direction,
    resolve_coin_direction,
    resolve_utxo_direction,
    same_address,
)
from chaintrack.domain.entities import (
    CoinInput,
    CoinOutput,
    CoinRecord,
    EvmRecord,
    UtxoInput,
    UtxoOutput,
    UtxoRecord,
)
from chaintrack.domain.errors import OutpointLookupError

USER = "kaspa:quser"
OTHER = "kaspa:qother"


def utxo(outputs, inputs=()):
    return UtxoRecord(
        transaction_id="tx1",
        block_time=1700000000000,
        is_accepted=True,
        inputs=tuple(inputs),
        outputs=tuple(UtxoOutput(address=address, amount=str(amount)) for address, amount in outputs),
    )


class TestAccountDirection:
    """Tests for resolve_account_direction."""

    def test_sender(self):
        record = EvmRecord(
            hash="0x1", from_address="0xAbC", to_address="0xdef", value="5", input="0x", timestamp="0"
        )
        result = resolve_account_direction(record, "0xabc")
        assert result.direction == Direction.SENT
        assert result.sent_amount == 5
        assert result.is_sender is True

    def test_receiver(self):
        record = EvmRecord(
            hash="0x1", from_address="0xdef", to_address="0xabc", value="5", input="0x", timestamp="0"
        )
        result = resolve_account_direction(record, "0xABC")
        assert result.direction == Direction.RECEIVED
        assert result.received_amount == 5
        assert result.sent_amount == 0

    def test_malformed_value_is_zero(self):
        record = EvmRecord(
            hash="0x1", from_address="0xabc", to_address="0xdef", value="-1", input="0x", timestamp="0"
        )
        assert resolve_account_direction(record, "0xabc").sent_amount == 0


class TestUtxoDirection:
    """Tests for resolve_utxo_direction."""

    def test_pure_send(self):
        result = resolve_utxo_direction(utxo([(OTHER, 100)]), USER)
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100

    def test_pure_receive(self):
        result = resolve_utxo_direction(utxo([(USER, 40), (USER, 2)]), USER)
        assert result.direction == Direction.RECEIVED
        assert result.received_amount == 42

    def test_change_collapses_to_send(self):
        """100 to others plus 30 change is a send of 100, not a net 70."""
        result = resolve_utxo_direction(utxo([(OTHER, 100), (USER, 30)]), USER)
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100
        assert result.received_amount == 0

    def test_report_change_keeps_change(self):
        result = resolve_utxo_direction(
            utxo([(OTHER, 100), (USER, 30)]), USER, UtxoChangePolicy.REPORT_CHANGE
        )
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100
        assert result.received_amount == 30

    def test_address_match_is_case_insensitive(self):
        result = resolve_utxo_direction(utxo([("KASPA:QUSER", 7)]), USER)
        assert result.direction == Direction.RECEIVED

    def test_no_outputs_is_none(self):
        assert resolve_utxo_direction(utxo([]), USER).direction == Direction.NONE

    def test_counterparty_funded_payment_is_receive(self):
        """Other party pays the user 5 and takes 95 change back."""
        record = utxo([(USER, 5), (OTHER, 95)], inputs=[UtxoInput("prev", 0, owner=OTHER)])
        result = resolve_utxo_direction(record, USER, UtxoChangePolicy.REPORT_CHANGE)
        assert result.direction == Direction.RECEIVED
        assert result.received_amount == 5
        assert result.sent_amount == 0

    def test_user_owned_input_keeps_change_rule(self):
        inputs = [UtxoInput("prev", 0, owner=OTHER), UtxoInput("prev", 1, owner="KASPA:QUSER")]
        result = resolve_utxo_direction(utxo([(OTHER, 100), (USER, 30)], inputs=inputs), USER)
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100

    def test_unknown_input_owners_keep_change_rule(self):
        inputs = [UtxoInput("prev", 0), UtxoInput("prev", 1, owner="")]
        result = resolve_utxo_direction(utxo([(OTHER, 100), (USER, 30)], inputs=inputs), USER)
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100


class TestCoinDirection:
    """Tests for resolve_coin_direction."""

    def _record(self, inputs, outputs):
        return CoinRecord(
            id="0x1",
            time=None,
            inputs=tuple(CoinInput(owner=o, amount=str(a)) for o, a in inputs),
            outputs=tuple(CoinOutput(to=t, amount=str(a)) for t, a in outputs),
        )

    def test_net_send(self):
        result = resolve_coin_direction(self._record([("0xu", 100)], [("0xo", 60), ("0xu", 39)]), "0xU")
        assert result.direction == Direction.SENT
        assert result.sent_amount == 61

    def test_net_receive(self):
        result = resolve_coin_direction(self._record([("0xo", 100)], [("0xu", 25)]), "0xu")
        assert result.direction == Direction.RECEIVED
        assert result.received_amount == 25

    def test_balanced_is_none(self):
        result = resolve_coin_direction(self._record([("0xu", 10)], [("0xu", 10)]), "0xu")
        assert result.direction == Direction.NONE

    def test_only_base_asset_counts(self):
        record = CoinRecord(
            id="0x1",
            time=None,
            inputs=(CoinInput("0xu", "100", asset_id="0xETH"), CoinInput("0xu", "5000", asset_id="0xusdc")),
            outputs=(CoinOutput("0xo", "60", asset_id="0xeth"), CoinOutput("0xo", "5000", asset_id="0xusdc")),
        )
        result = resolve_coin_direction(record, "0xu", frozenset({"0xeth"}))
        assert result.direction == Direction.SENT
        assert result.sent_amount == 100

    def test_missing_asset_id_counts_as_base(self):
        record = self._record([("0xo", 1)], [("0xu", 25)])
        result = resolve_coin_direction(record, "0xu", frozenset({"0xeth"}))
        assert result.received_amount == 25


class TestUtxoFee:
    """Tests for compute_utxo_fee."""

    def _spending(self):
        return utxo(
            [(OTHER, 100), (USER, 30)],
            inputs=[UtxoInput("prev", 0), UtxoInput("prev", 1)],
        )

    def test_fee_from_traced_inputs(self):
        amounts = {("prev", 0): 90, ("prev", 1): 45}
        assert compute_utxo_fee(self._spending(), lambda h, i: amounts.get((h, i))) == 5

    def test_no_lookup_means_no_fee(self):
        assert compute_utxo_fee(self._spending(), None) is None

    def test_untraced_input_omits_fee(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chaintrack"):
            fee = compute_utxo_fee(self._spending(), lambda h, i: 200 if i == 0 else None)
        assert fee is None
        assert "untraceable" in caplog.text

    @pytest.mark.parametrize("error", [OutpointLookupError("boom"), TimeoutError("slow")])
    def test_failing_lookup_omits_fee(self, error):
        def lookup(previous_hash, index):
            raise error

        assert compute_utxo_fee(self._spending(), lookup) is None

    def test_non_positive_fee_is_omitted(self):
        assert compute_utxo_fee(self._spending(), lambda h, i: 65) is None

    def test_lookup_from_records(self):
        previous = UtxoRecord(
            transaction_id="prev",
            block_time=0,
            is_accepted=True,
            outputs=(UtxoOutput(USER, "90"), UtxoOutput(USER, "45")),
        )
        lookup = outpoint_lookup_from_records([previous])
        assert lookup("prev", 1) == 45
        assert lookup("prev", 2) is None
        assert lookup("missing", 0) is None
        assert compute_utxo_fee(self._spending(), lookup) == 5


def test_same_address():
    assert same_address("0xABC", " 0xabc ") is True
    assert same_address("", "") is False
    assert same_address(None, "0xabc") is False
