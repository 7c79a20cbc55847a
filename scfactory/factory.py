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

"""
Factory contract commands: set, deployViaFactory, deployViaFactoryByVersion.

Contract types are identified on-chain by keccak256 of their name. The new
proxy address is read from the ContractDeployed event of the receipt; if
no such log can be decoded, the factory's deployedContracts(sender) list is
queried and its last entry used. That fallback can pick up another proxy if
the same sender deploys concurrently from elsewhere.
"""

import logging

from eth_utils import is_address, to_bytes, to_checksum_address, to_hex

from scfactory import abi
from scfactory.abiargs import coerce_value, parse_json_args
from scfactory.config import resolve_factory
from scfactory.deploy import DeploymentResult, gasless_not_supported
from scfactory.errors import ConfigurationError
from scfactory.executor import Deployer

logger = logging.getLogger(__name__)


def _checked_address(value, what):
    if not is_address(value):
        raise ConfigurationError(f"{what} is not a valid address: {value}")
    return to_checksum_address(value)


def build_init_data(fn_signature, fn_args_json):
    """Encode the initializer call the factory runs on the new proxy."""
    entry = abi.parse_function_signature(fn_signature)
    args = parse_json_args(fn_args_json, "fnArgs")
    inputs = entry["inputs"]
    if len(args) != len(inputs):
        raise ConfigurationError(
            f"{entry['name']} expects {len(inputs)} argument(s), got {len(args)}"
        )
    coerced = [coerce_value(p, v) for p, v in zip(inputs, args)]
    abi.check_arguments(inputs, coerced)
    return to_bytes(hexstr=abi.encode_function(entry, coerced))


# ---------------------------
# Proxy address resolution
# ---------------------------
def latest_registered(factory, owner):
    deployed = factory.functions.deployedContracts(owner).call()
    if not deployed:
        logger.warning("deployedContracts mapping is empty for %s", owner)
        return None
    return deployed[-1]


def resolve_proxy_address(factory, receipt, owner):
    """Event log first, registry second; "" when neither yields an address."""
    proxy = abi.deployed_proxy(factory, receipt)
    if proxy:
        return proxy
    logger.debug("No ContractDeployed log in receipt, querying deployedContracts")
    try:
        proxy = latest_registered(factory, owner)
    except Exception as e:
        logger.warning("deployedContracts lookup failed: %s", e)
        proxy = None
    if not proxy:
        logger.warning("Could not determine the deployed proxy address")
        return ""
    return proxy


# ---------------------------
# Commands
# ---------------------------
def set_implementation(impl_address, contract_type, options, settings, prompter,
                       deployer_factory=Deployer.from_settings):
    if options.gasless:
        gasless_not_supported("setImplementation")

    impl_address = _checked_address(impl_address, "Implementation")
    factory_address = resolve_factory(options.chain_id, settings)
    deployer = deployer_factory(options.chain_id, settings, prompter)
    factory = abi.factory_contract(deployer.w3, factory_address)

    print("Setting implementation on-chain...")
    type_hash = abi.contract_type_hash(contract_type)
    logger.debug("contractType %s -> %s", contract_type, to_hex(type_hash))
    call = abi.bind(factory.functions.setImplementation, type_hash, impl_address)
    tx_hash, _ = deployer.transact(call, "setImplementation")
    print(f"setImplementation tx {tx_hash}")
    return tx_hash


def _deploy_through_factory(fn_name, call_args, action, options, settings, prompter,
                            deployer_factory):
    factory_address = resolve_factory(options.chain_id, settings)
    deployer = deployer_factory(options.chain_id, settings, prompter)
    factory = abi.factory_contract(deployer.w3, factory_address)
    call = abi.bind(factory.functions[fn_name], *call_args)
    tx_hash, receipt = deployer.transact(call, action)
    proxy = resolve_proxy_address(factory, receipt, deployer.address)
    return DeploymentResult(address=proxy, tx_hash=tx_hash)


def deploy_via_factory(owner, contract_type, fn_signature, fn_args_json, options, settings,
                       prompter, deployer_factory=Deployer.from_settings):
    if options.gasless:
        gasless_not_supported("deployViaFactory")

    owner = _checked_address(owner, "Implementation owner")
    init_data = build_init_data(fn_signature, fn_args_json)
    type_hash = abi.contract_type_hash(contract_type)

    print("Deploying via Factory on-chain...")
    result = _deploy_through_factory(
        "deployContract", [owner, type_hash, init_data], "deployViaFactory",
        options, settings, prompter, deployer_factory,
    )
    print(f"Proxy deployed at {result.address}")
    print("   txHash:", result.tx_hash)
    return result


def deploy_via_factory_by_version(owner, contract_type, version, fn_signature, fn_args_json,
                                  options, settings, prompter,
                                  deployer_factory=Deployer.from_settings):
    if options.gasless:
        gasless_not_supported("deployViaFactoryByVersion")
    if version < 1:
        raise ConfigurationError("version is 1-based and must be >= 1")

    owner = _checked_address(owner, "Implementation owner")
    init_data = build_init_data(fn_signature, fn_args_json)
    type_hash = abi.contract_type_hash(contract_type)

    print(f"Deploying via Factory (v{version})...")
    result = _deploy_through_factory(
        "deployContractByVersion", [owner, type_hash, version, init_data],
        "deployViaFactoryByVersion", options, settings, prompter, deployer_factory,
    )
    print(f"Proxy (v{version}) deployed at {result.address}")
    print("   txHash:", result.tx_hash)
    return result
