# Copyright 2025 R5
# This file is part of the R5 Core library.
#
# This software is provided "as is", without warranty of any kind,
# express or implied, including but not limited to the warranties
# of merchantability, fitness for a particular purpose and
# noninfringement. In no event shall the authors or copyright
# holders be liable for any claim, damages, or other liability,
# whether in an action of contract, tort or otherwise, arising
# from, out of or in connection with the software or the use or
# other dealings in the software.

VERSION = "0.1.0"

CONFIG_FILE = "scfactory.ini"
CONFIG_SECTION = "SCFactory"
DOTENV_FILE = ".env"

DEFAULT_ARTIFACTS_DIR = "artifacts/contracts"
DEFAULT_COMPILE_COMMAND = "npx hardhat compile"

# ---------------------------
# Networks
# ---------------------------
FACTORY_ADDRESS = {
    11155111: "0x7d4B0E58A871DBB35C7DFd131ba1eEdD3a767e67",
}

RPC_URLS = {
    1: "https://eth.llamarpc.com",
    137: "https://polygon.drpc.org",
    11155111: "https://1rpc.io/sepolia",
    80002: "https://rpc-amoy.polygon.technology/",
    592: "https://evm.astar.network",
    1868: "https://rpc.soneium.org",
    1946: "https://rpc.minato.soneium.org",
    480: "https://worldchain-mainnet.g.alchemy.com/public",
    4801: "https://worldchain-sepolia.g.alchemy.com/public",
    336: "https://shiden.api.onfinality.io/public",
    42220: "https://forno.celo.org",
    44787: "https://alfajores-forno.celo-testnet.org",
    56: "https://bsc.publicnode.com",
    97: "https://bsc-testnet.publicnode.com",
    43114: "https://api.avax.network/ext/bc/C/rpc",
    43113: "https://api.avax-test.network/ext/bc/C/rpc",
    1101: "https://zkevm-rpc.com",
    2442: "https://etherscan.cardona.zkevm-rpc.com/",
}

# ---------------------------
# Factory contract interface
# ---------------------------
FACTORY_ABI = [
    {
        "type": "event",
        "name": "ContractDeployed",
        "anonymous": False,
        "inputs": [
            {"name": "implementationOwner", "type": "address", "indexed": True},
            {"name": "contractType", "type": "bytes32", "indexed": True},
            {"name": "proxy", "type": "address", "indexed": True},
            {"name": "deployer", "type": "address", "indexed": False},
        ],
    },
    {
        "type": "function",
        "name": "setImplementation",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "contractType", "type": "bytes32"},
            {"name": "impl", "type": "address"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "deployContract",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "implementationOwner", "type": "address"},
            {"name": "contractType", "type": "bytes32"},
            {"name": "initData", "type": "bytes"},
        ],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "deployContractByVersion",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "implementationOwner", "type": "address"},
            {"name": "contractType", "type": "bytes32"},
            {"name": "version", "type": "uint32"},
            {"name": "initData", "type": "bytes"},
        ],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "deployedContracts",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "address[]"}],
    },
]

# ---------------------------
# Scaffolding
# ---------------------------
NPM_DEV_DEPENDENCIES = [
    "hardhat",
    "hardhat-contract-sizer",
    "@nomicfoundation/hardhat-toolbox",
    "typescript",
    "ts-node",
    "@openzeppelin/hardhat-upgrades",
    "@openzeppelin/contracts",
    "@openzeppelin/contracts-upgradeable",
]
