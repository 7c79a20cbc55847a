"""Unit tests for signature parsing, type checks and contract encoding."""

import pytest
from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector, keccak, to_bytes
from web3 import Web3

from scfactory import abi
from scfactory.errors import ArgumentTypeError, ConfigurationError

from tests.conftest import GREETER_ABI, OWNER_ADDRESS, SEPOLIA_FACTORY


class TestParseFunctionSignature:
    def test_unnamed_parameters(self):
        entry = abi.parse_function_signature("function initialize(string,string,uint256)")
        assert entry["name"] == "initialize"
        assert [p["type"] for p in entry["inputs"]] == ["string", "string", "uint256"]

    def test_named_parameters_and_modifiers(self):
        entry = abi.parse_function_signature(
            "function initialize(string memory name, address payable owner, uint supply) external"
        )
        assert [(p["name"], p["type"]) for p in entry["inputs"]] == [
            ("name", "string"), ("owner", "address"), ("supply", "uint256"),
        ]

    def test_tuple_parameters(self):
        entry = abi.parse_function_signature(
            "function init((address,uint96)[] payees, tuple(string,bool) meta)"
        )
        payees, meta = entry["inputs"]
        assert payees["type"] == "tuple[]"
        assert payees["name"] == "payees"
        assert [c["type"] for c in payees["components"]] == ["address", "uint96"]
        assert abi.canonical_type(meta) == "(string,bool)"

    def test_no_parameters(self):
        assert abi.parse_function_signature("function initialize()")["inputs"] == []

    def test_invalid_signature(self):
        with pytest.raises(ConfigurationError, match="Invalid fnSignature"):
            abi.parse_function_signature("initialize(string)")

    def test_unbalanced(self):
        with pytest.raises(ConfigurationError):
            abi.parse_function_signature("function initialize(string")


class TestTypes:
    @pytest.mark.parametrize("abi_type", ["uint256", "int8", "bytes32", "address[2]", "(uint256,bool)[]"])
    def test_valid(self, abi_type):
        abi.check_type(abi_type)

    @pytest.mark.parametrize("abi_type", ["uint7", "bytes33", "int0", "uint264"])
    def test_invalid_is_argument_type_error(self, abi_type):
        with pytest.raises(ArgumentTypeError, match=abi_type) as excinfo:
            abi.check_type(abi_type)
        assert excinfo.value.abi_type == abi_type

    def test_invalid_type_in_signature(self):
        with pytest.raises(ArgumentTypeError, match="bytes33"):
            abi.parse_function_signature("function initialize(bytes33 salt)")

    def test_check_arguments_accepts_encodable(self):
        inputs = [{"name": "owner", "type": "address"}, {"name": "cap", "type": "uint8"}]
        abi.check_arguments(inputs, [OWNER_ADDRESS, 255])

    def test_check_arguments_names_the_parameter(self):
        inputs = [{"name": "owner", "type": "address"}, {"name": "cap", "type": "uint8"}]
        with pytest.raises(ArgumentTypeError, match="cap is not a valid uint8"):
            abi.check_arguments(inputs, [OWNER_ADDRESS, 256])

    def test_check_arguments_short_fixed_bytes(self):
        with pytest.raises(ArgumentTypeError, match="bytes32"):
            abi.check_arguments([{"name": "salt", "type": "bytes32"}], [b"\xab"])


class TestEncoding:
    def test_known_selector(self):
        entry = abi.parse_function_signature("function transfer(address to, uint256 amount)")
        assert abi.encode_function(entry, [OWNER_ADDRESS, 1]).startswith("0xa9059cbb")

    def test_encode_function(self):
        entry = abi.parse_function_signature("function initialize(string,string,uint256)")
        data = to_bytes(hexstr=abi.encode_function(entry, ["MyToken", "TTK", 1000]))
        selector = function_signature_to_4byte_selector("initialize(string,string,uint256)")
        assert data[:4] == selector
        assert decode(["string", "string", "uint256"], data[4:]) == ("MyToken", "TTK", 1000)

    def test_encode_tuple_argument(self):
        entry = abi.parse_function_signature("function init((address,uint96) payee)")
        data = to_bytes(hexstr=abi.encode_function(entry, [(OWNER_ADDRESS, 5)]))
        assert data[:4] == function_signature_to_4byte_selector("init((address,uint96))")
        assert decode(["(address,uint96)"], data[4:]) == ((OWNER_ADDRESS.lower(), 5),)

    def test_encoding_failure_is_argument_type_error(self):
        entry = abi.parse_function_signature("function initialize(uint8 x)")
        with pytest.raises(ArgumentTypeError):
            abi.encode_function(entry, [1000])

    def test_bind_constructor_failure(self):
        contract = Web3().eth.contract(abi=GREETER_ABI, bytecode="0x6080")
        with pytest.raises(ArgumentTypeError, match="Cannot encode"):
            abi.bind(contract.constructor, 1, 2)

    def test_contract_type_hash(self):
        assert abi.contract_type_hash("MyToken") == keccak(b"MyToken")
        assert len(abi.contract_type_hash("MyToken")) == 32

    def test_factory_contract(self):
        factory = abi.factory_contract(Web3(), SEPOLIA_FACTORY)
        assert factory.address == SEPOLIA_FACTORY
        data = factory.encode_abi("deployContractByVersion", args=[OWNER_ADDRESS, b"\x01" * 32, 3, b""])
        assert data.startswith("0x" + function_signature_to_4byte_selector(
            "deployContractByVersion(address,bytes32,uint32,bytes)").hex())
