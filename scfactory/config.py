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
Settings for a single SCFactory invocation.

Settings are assembled once in main() and passed down to every command:
  • built-in defaults (see constants.py)
  • an optional local "scfactory.ini" ([SCFactory] section)
  • the ".env" file in the working directory (never overrides the process env)
  • the process environment (PRIVATE_KEY, RPC_URL, RPC_URL_<chainId>,
    FACTORY_ADDRESS_<chainId>)
"""

import configparser
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import dotenv_values
from eth_utils import is_hex_address, to_checksum_address

from scfactory import constants
from scfactory.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    private_key: Optional[str] = None
    rpc_url: Optional[str] = None
    chain_rpc_urls: Dict[int, str] = field(default_factory=dict)
    factory_addresses: Dict[int, str] = field(default_factory=dict)
    artifacts_dir: str = constants.DEFAULT_ARTIFACTS_DIR
    compile_command: str = constants.DEFAULT_COMPILE_COMMAND


def load_local_config(path=constants.CONFIG_FILE):
    """Return a dict of settings from a local config file if it exists; else {}."""
    local = {}
    if os.path.exists(path):
        config = configparser.ConfigParser()
        config.read(path)
        if constants.CONFIG_SECTION in config:
            local = dict(config[constants.CONFIG_SECTION])
        logger.debug("Loaded %d setting(s) from %s", len(local), path)
    return local


def _chain_suffixed(values, prefix):
    """Collect "<prefix><chainId>" keys into {chainId: value}."""
    result = {}
    prefix = prefix.lower()
    for key, value in values.items():
        if not value or not key.lower().startswith(prefix):
            continue
        suffix = key[len(prefix):]
        if suffix.isdigit():
            result[int(suffix)] = value
    return result


def load_settings(environ=None, workdir="."):
    """
    Build the Settings for this invocation.
    environ defaults to os.environ; it is only read, never modified.
    """
    if environ is None:
        environ = os.environ
    ini = load_local_config(os.path.join(workdir, constants.CONFIG_FILE))

    dotenv_path = os.path.join(workdir, constants.DOTENV_FILE)
    env = {}
    if os.path.exists(dotenv_path):
        env.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    # Process environment wins over .env
    env.update(environ)

    chain_rpc_urls = _chain_suffixed(ini, "rpc_url_")
    chain_rpc_urls.update(_chain_suffixed(env, "RPC_URL_"))
    factory_addresses = _chain_suffixed(ini, "factory_")
    factory_addresses.update(_chain_suffixed(env, "FACTORY_ADDRESS_"))

    return Settings(
        private_key=env.get("PRIVATE_KEY") or None,
        rpc_url=env.get("RPC_URL") or ini.get("rpc_url") or None,
        chain_rpc_urls=chain_rpc_urls,
        factory_addresses=factory_addresses,
        artifacts_dir=ini.get("artifacts_dir", constants.DEFAULT_ARTIFACTS_DIR),
        compile_command=ini.get("compile_command", constants.DEFAULT_COMPILE_COMMAND),
    )


# ---------------------------
# Resolvers
# ---------------------------
def resolve_rpc(chain_id, settings):
    """Per-chain override, then the generic RPC_URL, then the built-in table."""
    url = settings.chain_rpc_urls.get(chain_id) or settings.rpc_url
    if not url:
        url = constants.RPC_URLS.get(chain_id)
    if not url:
        raise ConfigurationError(
            f"RPC URL not set (expected RPC_URL_{chain_id} or RPC_URL)"
        )
    logger.debug("Using RPC %s for chain %s", url, chain_id)
    return url


def resolve_factory(chain_id, settings):
    address = settings.factory_addresses.get(chain_id) or constants.FACTORY_ADDRESS.get(chain_id)
    if not address:
        raise ConfigurationError(f"Factory not deployed on chainId {chain_id}")
    if not is_hex_address(address):
        raise ConfigurationError(f"Factory address for chainId {chain_id} is not valid: {address}")
    return to_checksum_address(address)


def require_private_key(settings):
    """Return the signing key as 0x-prefixed hex, or raise ConfigurationError."""
    if not settings.private_key:
        raise ConfigurationError("PRIVATE_KEY env missing")
    key = settings.private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    try:
        raw = bytes.fromhex(key[2:])
    except ValueError:
        raise ConfigurationError("PRIVATE_KEY is not valid hex") from None
    if len(raw) != 32:
        raise ConfigurationError("PRIVATE_KEY must be 32 bytes")
    return key


@dataclass(frozen=True)
class DeploymentOptions:
    """Flags of one deploy/set/deployViaFactory invocation."""

    chain_id: int
    args: str = "[]"
    initializer: Optional[str] = None
    init_args: str = "[]"
    contract: Optional[str] = None
    compile: bool = True
    gasless: bool = False
    access_token: Optional[str] = None
    client_key: Optional[str] = None
