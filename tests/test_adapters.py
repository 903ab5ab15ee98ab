"""Tests for chain adapters."""

from datetime import UTC, datetime

import pytest

from chaintrack.adapters import (
    normalize_address,
    parse_evm_record,
    parse_fuel_record,
    parse_kaspa_record,
    parse_record,
    unwrap_records,
    validate_address,
    validate_evm_address,
    validate_fuel_address,
    validate_kaspa_address,
)
from chaintrack.adapters.kaspa import normalize_kaspa_address
from chaintrack.domain.chains import get_chain
from chaintrack.domain.entities import CoinRecord, EvmRecord, UtxoRecord
from chaintrack.domain.errors import ValidationError

from conftest import FUEL_OTHER, FUEL_USER, KASPA_OTHER, KASPA_USER


class TestEvmAdapter:
    """Tests for the Blockscout/Etherscan adapter."""

    def test_parse_native_item(self, celo_records):
        record = parse_evm_record(celo_records[0])

        assert isinstance(record, EvmRecord)
        assert record.hash == "0xaaa1"
        assert record.from_address == "0x1111111111111111111111111111111111111111"
        assert record.value == "1500000000000000000"
        assert record.input == "0x"
        assert record.gas_used == "21000"
        assert record.txreceipt_status == "1"
        assert record.is_error == "0"
        assert record.is_token_transfer is False

    def test_token_symbol_marks_token_record(self):
        record = parse_evm_record(
            {
                "hash": "0x1",
                "from": "0xa",
                "to": "0xb",
                "value": "5",
                "tokenSymbol": "USDC",
                "tokenDecimal": "6",
                "contractAddress": "0xc",
                "timeStamp": "1",
            }
        )
        assert record.is_token_transfer is True
        assert record.token_decimal == "6"
        assert record.contract_address == "0xc"

    def test_explicit_token_flag(self):
        record = parse_evm_record({"hash": "0x1", "from": "0xa", "to": "0xb", "isTokenTransfer": True})
        assert record.is_token_transfer is True

    def test_missing_fields_get_defaults(self):
        record = parse_evm_record({"hash": "0x1", "from": "0xa", "to": ""})

        assert record.to_address is None
        assert record.value == "0"
        assert record.input == "0x"
        assert record.gas_used == ""
        assert record.txreceipt_status is None

    def test_rejects_non_object(self):
        with pytest.raises(ValidationError):
            parse_evm_record(["not", "an", "object"])

    def test_validate_address(self):
        assert validate_evm_address("0x1111111111111111111111111111111111111111") is True
        assert validate_evm_address("0xABCDEFabcdef0000000000000000000000000000") is True
        assert validate_evm_address("0x123") is False
        assert validate_evm_address("1111111111111111111111111111111111111111") is False
        assert validate_evm_address("") is False


class TestKaspaAdapter:
    """Tests for the Kaspa adapter."""

    def test_parse_snake_case(self, kaspa_records):
        record = parse_kaspa_record(kaspa_records[0])

        assert isinstance(record, UtxoRecord)
        assert record.transaction_id == "a1" * 32
        assert record.block_time == 1704067200000
        assert record.is_accepted is True
        assert record.payload is None
        assert record.inputs[0].previous_outpoint_hash == "d4" * 32
        assert record.inputs[0].previous_outpoint_index == 0
        assert [o.address for o in record.outputs] == [KASPA_OTHER, KASPA_USER]
        assert [o.amount for o in record.outputs] == ["10000000000", "3000000000"]

    def test_parse_camel_case(self, kaspa_records):
        record = parse_kaspa_record(kaspa_records[1])

        assert record.transaction_id == "b2" * 32
        assert record.block_time == 1706745600000
        assert record.is_accepted is False
        assert record.inputs[0].previous_outpoint_index == 1
        assert record.outputs[0].address == KASPA_USER

    def test_payload(self, kaspa_records):
        assert parse_kaspa_record(kaspa_records[2]).payload == "68656c6c6f"

    def test_value_key_and_missing_subnetwork(self):
        record = parse_kaspa_record(
            {"transactionId": "t", "outputs": [{"scriptPublicKeyAddress": "KASPA:QX", "value": "9"}]}
        )
        assert record.subnetwork_id == "0"
        assert record.outputs[0].address == "kaspa:qx"
        assert record.outputs[0].amount == "9"
        assert record.block_time == 0

    def test_accepted_as_string(self):
        assert parse_kaspa_record({"transaction_id": "t", "is_accepted": "true"}).is_accepted is True

    def test_validate_address(self):
        assert validate_kaspa_address(KASPA_USER) is True
        assert validate_kaspa_address(KASPA_USER.upper()) is True
        assert validate_kaspa_address("kaspa:short") is False
        assert validate_kaspa_address("bitcoin:" + "q" * 61) is False
        assert validate_kaspa_address("kaspa:" + "q" * 60 + "!") is False

    def test_normalize_address(self):
        assert normalize_kaspa_address("  KASPA:QABC ") == "kaspa:qabc"
        assert normalize_kaspa_address("qabc") == "kaspa:qabc"


class TestFuelAdapter:
    """Tests for the Fuel adapter."""

    def test_parse_success_node(self, fuel_nodes):
        record = parse_fuel_record(fuel_nodes[0])

        assert isinstance(record, CoinRecord)
        assert record.id == "0x" + "1" * 64
        assert record.succeeded is True
        assert record.failure_reason is None
        assert record.time == datetime(2024, 1, 1, tzinfo=UTC)
        assert record.inputs[0].owner == FUEL_USER
        assert record.inputs[0].amount == "2000000000"
        assert [o.to for o in record.outputs] == [FUEL_OTHER, FUEL_USER]

    def test_status_without_typename(self, fuel_nodes):
        record = parse_fuel_record(fuel_nodes[1])

        assert record.succeeded is True
        assert record.time == datetime(2024, 2, 1, tzinfo=UTC)

    def test_failure_node_skips_contract_io(self, fuel_nodes):
        record = parse_fuel_record(fuel_nodes[2])

        assert record.succeeded is False
        assert record.failure_reason == "Revert(0)"
        assert record.time == datetime(2024, 3, 1, tzinfo=UTC)
        assert record.inputs == ()
        assert record.outputs == ()

    def test_submitted_status(self):
        record = parse_fuel_record({"id": "0x1", "status": {"__typename": "SubmittedStatus", "time": "1700000000"}})
        assert record.succeeded is False
        assert record.time == datetime.fromtimestamp(1700000000, UTC)

    def test_missing_status(self):
        record = parse_fuel_record({"id": "0x1"})
        assert record.time is None
        assert record.succeeded is False

    def test_validate_address(self):
        assert validate_fuel_address(FUEL_USER) is True
        assert validate_fuel_address("fuel1" + "q" * 58) is True
        assert validate_fuel_address("0x1111111111111111111111111111111111111111") is False
        assert validate_fuel_address("") is False


class TestDispatch:
    """Tests for chain-model dispatch."""

    def test_parse_record_by_model(self, celo_records, kaspa_records, fuel_nodes):
        assert isinstance(parse_record(get_chain("celo"), celo_records[0]), EvmRecord)
        assert isinstance(parse_record(get_chain("kaspa"), kaspa_records[0]), UtxoRecord)
        assert isinstance(parse_record(get_chain("fuel-testnet"), fuel_nodes[0]), CoinRecord)

    def test_validate_and_normalize_address(self):
        assert validate_address(get_chain("humanity"), "0x1111111111111111111111111111111111111111")
        assert not validate_address(get_chain("kaspa"), "0x1111111111111111111111111111111111111111")
        assert normalize_address(get_chain("kaspa"), KASPA_USER.upper()) == KASPA_USER
        assert normalize_address(get_chain("celo"), " 0xAbC ") == "0xAbC"


class TestUnwrapRecords:
    """Tests for unwrap_records."""

    def test_bare_list(self):
        assert unwrap_records([{"a": 1}]) == [{"a": 1}]

    def test_explorer_envelope(self):
        assert unwrap_records({"status": "1", "result": [{"a": 1}]}) == [{"a": 1}]

    def test_graphql_response(self):
        payload = {"data": {"transactionsByOwner": {"nodes": [{"id": "0x1"}]}}}
        assert unwrap_records(payload) == [{"id": "0x1"}]

    def test_bare_nodes(self):
        assert unwrap_records({"nodes": []}) == []

    @pytest.mark.parametrize("payload", [{"status": "0", "result": "Max rate limit reached"}, "text", 3])
    def test_rejects_unknown_shape(self, payload):
        with pytest.raises(ValidationError):
            unwrap_records(payload)


def test_counterparty_input_owner_is_parsed(kaspa_records):
    raw = dict(kaspa_records[0])
    raw["inputs"] = [
        {
            "previous_outpoint_hash": "aa",
            "previous_outpoint_index": "1",
            "previous_outpoint_address": KASPA_OTHER,
        }
    ]
    record = parse_kaspa_record(raw)
    assert record.inputs[0].owner == KASPA_OTHER
    assert record.inputs[0].previous_outpoint_index == 1
