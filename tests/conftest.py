"""Shared pytest fixtures for scfactory tests."""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
from eth_abi import encode
from eth_account import Account
from eth_utils import event_abi_to_log_topic, keccak, to_bytes, to_checksum_address, to_hex
from hexbytes import HexBytes
from web3 import Web3
from web3.providers import BaseProvider

from scfactory import abi, constants
from scfactory.config import Settings
from scfactory.executor import Deployer
from scfactory.prompter import Prompter

# Hardhat's first default account; never holds real funds.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
DEPLOYED_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
PROXY_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
OWNER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
IMPL_ADDRESS = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"
SEPOLIA_FACTORY = to_checksum_address(constants.FACTORY_ADDRESS[11155111])
GWEI = 10**9

class ScriptedPrompter(Prompter):
    """Prompter answering from pre-recorded lists and recording every question."""

    def __init__(self, answers=None, confirms=None, choices=None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.choices = list(choices or [])
        self.asked: List[str] = []
        self.confirmed: List[str] = []
        self.offered: List[List[str]] = []

    def ask(self, message, default=None):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {message}")
        answer = self.answers.pop(0)
        return default if answer == "" and default is not None else answer

    def confirm(self, message, default=True):
        self.confirmed.append(message)
        return self.confirms.pop(0) if self.confirms else default

    def choose(self, message, choices):
        self.offered.append(list(choices))
        return self.choices.pop(0)


class FakeNode(BaseProvider):
    """
    In-memory JSON-RPC node answering the handful of methods a deployment
    needs. Requests go through web3's real formatters and contract codecs.
    """

    def __init__(self, base_fee=10 * GWEI, priority_fee=GWEI, gas_price=5 * GWEI,
                 gas=100_000, chain_id=11155111):
        super().__init__()
        self.base_fee = base_fee
        self.priority_fee = priority_fee
        self.gas_price = gas_price
        self.gas = gas
        self.chain_id = chain_id
        self.receipt: Dict[str, Any] = {
            "status": 1,
            "contractAddress": DEPLOYED_ADDRESS,
            "blockNumber": 1,
            "logs": [],
        }
        self.registry: List[str] = []
        self.estimates: List[Dict[str, Any]] = []
        self.sent: List[bytes] = []
        self.calls: List[Dict[str, Any]] = []
        self.fail_estimate = False
        self.fail_call = False

    def is_connected(self, show_traceback=False):
        return True

    def make_request(self, method, params):
        handler = getattr(self, f"_{method}", None)
        if handler is None:
            return self._error(f"the method {method} does not exist/is not available")
        try:
            return {"jsonrpc": "2.0", "id": 1, "result": handler(*params)}
        except RuntimeError as e:
            return self._error(str(e))

    @staticmethod
    def _error(message):
        return {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": message}}

    def _eth_chainId(self):
        return hex(self.chain_id)

    def _eth_estimateGas(self, tx, *rest):
        if self.fail_estimate:
            raise RuntimeError("node unreachable")
        self.estimates.append(dict(tx))
        return hex(self.gas)

    def _eth_getBlockByNumber(self, block_id, full):
        block = {"number": "0x1"}
        if self.base_fee is not None:
            block["baseFeePerGas"] = hex(self.base_fee)
        return block

    def _eth_maxPriorityFeePerGas(self):
        if self.priority_fee is None:
            raise RuntimeError("the method eth_maxPriorityFeePerGas does not exist")
        return hex(self.priority_fee)

    def _eth_gasPrice(self):
        return hex(self.gas_price)

    def _eth_getTransactionCount(self, address, block_id):
        return hex(len(self.sent))

    def _eth_sendRawTransaction(self, raw):
        self.sent.append(bytes(HexBytes(raw)))
        return to_hex(keccak(HexBytes(raw)))

    def _eth_getTransactionReceipt(self, tx_hash):
        receipt = dict(self.receipt, transactionHash=tx_hash)
        receipt["status"] = hex(receipt["status"])
        receipt["blockNumber"] = hex(receipt["blockNumber"])
        receipt["logs"] = [dict(log, transactionHash=tx_hash) for log in receipt["logs"]]
        return receipt

    def _eth_call(self, tx, *rest):
        if self.fail_call:
            raise RuntimeError("header not found")
        self.calls.append(dict(tx))
        return to_hex(encode(["address[]"], [self.registry]))


def contract_deployed_log(owner, contract_type, proxy, deployer=TEST_ADDRESS):
    """A ContractDeployed log as a node returns it inside a receipt."""

    def topic(address):
        return to_hex(b"\x00" * 12 + to_bytes(hexstr=address))

    return {
        "address": SEPOLIA_FACTORY,
        "topics": [
            to_hex(event_abi_to_log_topic(constants.FACTORY_ABI[0])),
            topic(owner),
            to_hex(abi.contract_type_hash(contract_type)),
            topic(proxy),
        ],
        "data": to_hex(encode(["address"], [deployer])),
        "logIndex": "0x0",
        "transactionIndex": "0x0",
        "transactionHash": "0x" + "00" * 32,
        "blockHash": "0x" + "11" * 32,
        "blockNumber": "0x1",
    }


def fake_web3(**kwargs) -> Web3:
    return Web3(FakeNode(**kwargs))


def write_artifact(root: Path, source: str, name: str, abi_entries, bytecode="0x6080604052",
                   with_name=True) -> Path:
    """Write a Hardhat-style artifact under root/<source>/<name>.json."""
    directory = root / source
    directory.mkdir(parents=True, exist_ok=True)
    data = {"abi": abi_entries, "bytecode": bytecode}
    if with_name:
        data["contractName"] = name
    path = directory / f"{name}.json"
    path.write_text(json.dumps(data))
    return path


GREETER_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "initialMessage", "type": "string"}],
    },
    {
        "type": "function",
        "name": "initialize",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "cap", "type": "uint256"},
        ],
        "outputs": [],
    },
]


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def fake_w3() -> Web3:
    return fake_web3()


@pytest.fixture
def deployer_factory(fake_w3):
    """deployer_factory argument building a Deployer on the in-memory node."""

    def factory(chain_id, settings, prompter):
        return Deployer(fake_w3, Account.from_key(TEST_PRIVATE_KEY), prompter)

    return factory


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "artifacts" / "contracts"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def settings(artifacts_dir: Path) -> Settings:
    return Settings(
        private_key=TEST_PRIVATE_KEY,
        rpc_url="http://127.0.0.1:8545",
        artifacts_dir=str(artifacts_dir),
    )
