"""Tests for the command line interface."""

import json
import os
from unittest.mock import patch

import pytest
from web3 import Web3

from gmp_primitives.callback import build_callback
from gmp_primitives.cli import load_message, main
from gmp_primitives.config import GatewayDomainConfig
from gmp_primitives.hashing import gmp_message_id, hash_gmp_message
from gmp_primitives.type_registry import TYPE_HASHES

GATEWAY = "0x85BfE05492aFC3D04Ff3B2ca6771ACF6f853d90d"

ENV = {
    "GMP_CHAIN_ID": "1",
    "GMP_GATEWAY_ADDRESS": GATEWAY,
    "GMP_NETWORK_ID": "2",
}

MESSAGE = {
    "source": {"address": "0x" + "00" * 19 + "01", "is_contract": False},
    "src_network": 1,
    "dest": "0x" + "00" * 19 + "02",
    "dest_network": 2,
    "gas_limit": 100000,
    "salt": 42,
    "data": "0xdeadbeef",
}


@pytest.fixture
def message_file(tmp_path):
    path = tmp_path / "message.json"
    path.write_text(json.dumps(MESSAGE))
    return path


@pytest.fixture
def domain():
    return GatewayDomainConfig(chain_id=1, gateway_address=GATEWAY, network_id=2)


@pytest.fixture(autouse=True)
def no_dotenv():
    """Keep a developer's .env file out of the environment under test."""
    with patch("gmp_primitives.cli.load_dotenv") as mock_load_dotenv:
        yield mock_load_dotenv


def write_message(tmp_path, **overrides):
    path = tmp_path / "message.json"
    path.write_text(json.dumps({**MESSAGE, **overrides}))
    return path


class TestCli:
    """Test suite for the CLI entry point."""

    def test_load_message(self, message_file):
        """Test that a well-formed message file loads into a GmpMessage."""
        message = load_message(message_file)

        assert message.source.decode() == MESSAGE["source"]["address"]
        assert not message.source.is_contract
        assert message.data == bytes.fromhex("deadbeef")
        assert message.salt == 42

    def test_load_message_missing_field(self, tmp_path):
        """Test that a missing field is reported by name."""
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"src_network": 1}))
        with pytest.raises(ValueError, match="Missing field"):
            load_message(path)

    def test_load_message_invalid_json(self, tmp_path):
        """Test that unparsable JSON raises ValueError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_message(path)

    def test_string_contract_flag_rejected(self, tmp_path):
        """Test that a string is_contract is rejected instead of read as truthy."""
        path = write_message(tmp_path, source={**MESSAGE["source"], "is_contract": "false"})
        with pytest.raises(ValueError, match="is_contract must be a JSON boolean"):
            load_message(path)

    def test_contract_flag_true(self, tmp_path):
        """Test that a JSON true flag marks the sender as a contract."""
        path = write_message(tmp_path, source={**MESSAGE["source"], "is_contract": True})
        assert load_message(path).source.is_contract

    @pytest.mark.parametrize("field,value", [
        ("gas_limit", 100000.9),
        ("gas_limit", "100000"),
        ("src_network", 1.0),
        ("dest_network", True),
        ("salt", "42"),
    ])
    def test_non_integer_fields_rejected(self, tmp_path, field, value):
        """Test that integer fields are not truncated or coerced."""
        path = write_message(tmp_path, **{field: value})
        with pytest.raises(ValueError, match=f"{field} must be a JSON integer"):
            load_message(path)

    def test_non_string_data_rejected(self, tmp_path):
        """Test that data must be given as a hex string."""
        path = write_message(tmp_path, data=1234)
        with pytest.raises(ValueError, match="data must be a hex string"):
            load_message(path)

    def test_source_not_an_object(self, tmp_path):
        """Test that a string source is reported as a malformed message."""
        path = write_message(tmp_path, source="0x" + "00" * 19 + "01")
        with pytest.raises(ValueError, match="Malformed message"):
            load_message(path)

    def test_top_level_list(self, tmp_path):
        """Test that a JSON array is reported as a malformed message."""
        path = tmp_path / "message.json"
        path.write_text(json.dumps([MESSAGE]))
        with pytest.raises(ValueError, match="Malformed message"):
            load_message(path)

    @patch.dict(os.environ, ENV, clear=True)
    def test_malformed_message_exit_code(self, tmp_path):
        """Test that a malformed message exits with status 1 instead of a traceback."""
        path = tmp_path / "message.json"
        path.write_text(json.dumps([MESSAGE]))
        assert main(["message-id", str(path)]) == 1

    def test_type_hashes(self, capsys):
        """Test that type-hashes prints every registered descriptor hash."""
        assert main(["type-hashes"]) == 0
        output = json.loads(capsys.readouterr().out)

        assert set(output) == set(TYPE_HASHES)
        assert output["GmpMessage"]["hash"] == Web3.to_hex(TYPE_HASHES["GmpMessage"])

    @patch.dict(os.environ, ENV, clear=True)
    def test_domain_separator(self, capsys, domain):
        """Test that domain-separator prints the configured gateway's separator."""
        assert main(["domain-separator"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["domain_separator"] == Web3.to_hex(domain.domain_separator)

    @patch.dict(os.environ, ENV, clear=True)
    def test_message_id(self, capsys, message_file, domain):
        """Test that message-id prints the struct hash and typed message id."""
        assert main(["message-id", str(message_file)]) == 0
        output = json.loads(capsys.readouterr().out)

        message = load_message(message_file)
        assert output["struct_hash"] == Web3.to_hex(hash_gmp_message(message))
        assert output["message_id"] == Web3.to_hex(gmp_message_id(message, domain.domain_separator))

    @patch.dict(os.environ, ENV, clear=True)
    def test_callback(self, capsys, message_file, domain):
        """Test that callback prints the built payload."""
        assert main(["callback", str(message_file)]) == 0
        output = json.loads(capsys.readouterr().out)

        payload = build_callback(load_message(message_file), domain.domain_separator)
        assert output == payload.to_dict()

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_config_exit_code(self, message_file):
        """Test that missing configuration exits with status 1."""
        assert main(["message-id", str(message_file)]) == 1

    @patch.dict(os.environ, ENV, clear=True)
    def test_missing_file_exit_code(self, tmp_path):
        """Test that an unreadable message file exits with status 1."""
        assert main(["callback", str(tmp_path / "absent.json")]) == 1

    @patch.dict(os.environ, {}, clear=True)
    def test_dotenv_loaded_by_main(self, message_file, no_dotenv):
        """Test that main loads the .env file before reading configuration."""
        assert main(["message-id", str(message_file)]) == 1
        no_dotenv.assert_called_once_with()
