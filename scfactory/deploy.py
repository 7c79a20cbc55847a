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

"""Direct deployment of a compiled contract (the 'deploy' command)."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional

from scfactory import abi
from scfactory.abiargs import collect_arguments, parse_json_args
from scfactory.artifacts import find_artifact
from scfactory.errors import ConfigurationError, GaslessNotSupported, NotFoundError
from scfactory.executor import Deployer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentResult:
    address: str
    tx_hash: str
    contract_name: Optional[str] = None
    init_tx_hash: Optional[str] = None


def compile_contracts(command):
    cmd = shlex.split(command)
    logger.debug("Running %s", cmd)
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ConfigurationError(f"Compilation failed: {e}") from e


def gasless_not_supported(action):
    print(f"Gas-less {action} is not yet supported in this version.")
    print("    The --gasless flag will be enabled in a future release.")
    raise GaslessNotSupported(f"Gas-less {action} is not supported")
def deploy_contract(options, settings, prompter, deployer_factory=Deployer.from_settings):
    if options.gasless:
        gasless_not_supported("deployment")

    if options.compile:
        compile_contracts(settings.compile_command)

    artifact = find_artifact(settings.artifacts_dir, options.contract, prompter)
    print(f"Deploying contract: {artifact.name}")

    # Every argument is collected and checked before the first transaction.
    inputs = artifact.constructor_inputs
    ctor_args = collect_arguments(inputs, parse_json_args(options.args, "--args"), prompter)
    abi.check_arguments(inputs, ctor_args)

    initializer = None
    init_args = []
    if options.initializer:
        initializer = artifact.find("function", options.initializer)
        if initializer is None:
            raise NotFoundError(
                f"Initializer {options.initializer} not found in {artifact.name} ABI"
            )
        init_inputs = initializer.get("inputs", [])
        init_args = collect_arguments(
            init_inputs,
            parse_json_args(options.init_args, "--initArgs"),
            prompter,
            label="initializer",
        )
        abi.check_arguments(init_inputs, init_args)

    deployer = deployer_factory(options.chain_id, settings, prompter)
    contract = deployer.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    constructor = abi.bind(contract.constructor, *ctor_args)
    print("Deploying on-chain...")
    tx_hash, receipt = deployer.transact(constructor, "deployment")
    address = receipt.get("contractAddress")
    print(f"Deployed at {address}")

    init_tx_hash = None
    if initializer is not None:
        instance = deployer.w3.eth.contract(address=address, abi=artifact.abi)
        call = abi.bind(instance.functions[initializer["name"]], *init_args)
        print(f"Calling {initializer['name']} on {address}...")
        init_tx_hash, _ = deployer.transact(call, initializer["name"])
        print(f"Initialized via {initializer['name']}: tx {init_tx_hash}")

    return DeploymentResult(
        address=address,
        tx_hash=tx_hash,
        contract_name=artifact.name,
        init_tx_hash=init_tx_hash,
    )
