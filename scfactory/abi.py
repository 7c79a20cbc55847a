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
ABI helpers: human-readable signatures, argument validation and web3
contract bindings for artifacts and the factory.
"""

import re

from eth_abi.exceptions import ABITypeError, EncodingError, ParseError
from eth_abi.grammar import parse as parse_type
from eth_utils import keccak
from web3 import Web3
from web3.exceptions import Web3Exception
from web3.logs import DISCARD

from scfactory import constants
from scfactory.errors import ArgumentTypeError, ConfigurationError

SIGNATURE_HEAD = re.compile(r"^\s*function\s+([A-Za-z_$][\w$]*)\s*\(")
TYPE_ALIASES = {"uint": "uint256", "int": "int256", "byte": "bytes1"}
PARAM_KEYWORDS = {"memory", "calldata", "storage", "indexed", "payable"}


def check_type(abi_type):
    """Raise ArgumentTypeError unless abi_type is a valid ABI type string."""
    try:
        parse_type(abi_type).validate()
    except (ABITypeError, ParseError) as e:
        raise ArgumentTypeError(f"Unsupported type {abi_type}: {e}", abi_type) from e


# ---------------------------
# Human-readable signatures
# ---------------------------
def _closing_paren(text, start):
    """Index of the parenthesis closing the one at text[start]."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    raise ConfigurationError(f"Unbalanced parentheses in {text!r}")


def _split_top_level(text):
    parts, depth, start = [], 0, 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def _parse_param(text):
    text = text.strip()
    if text.startswith("tuple("):
        text = text[len("tuple"):]
    if text.startswith("("):
        end = _closing_paren(text, 0)
        components = parse_params(text[1:end])
        rest = text[end + 1:].split()
        suffix = ""
        if rest and rest[0].startswith("["):
            suffix = rest.pop(0)
        rest = [w for w in rest if w not in PARAM_KEYWORDS]
        return {
            "name": rest[0] if rest else "",
            "type": "tuple" + suffix,
            "components": components,
        }
    words = [w for w in text.split() if w not in PARAM_KEYWORDS]
    if not words:
        raise ConfigurationError("Empty parameter in signature")
    base = re.match(r"^([a-z]+\d*)(.*)$", words[0])
    if not base:
        raise ConfigurationError(f"Invalid parameter type {words[0]!r}")
    abi_type = TYPE_ALIASES.get(base.group(1), base.group(1)) + base.group(2)
    check_type(abi_type)
    return {"name": words[1] if len(words) > 1 else "", "type": abi_type}


def parse_params(text):
    return [_parse_param(p) for p in _split_top_level(text)]


def parse_function_signature(signature):
    """
    Parse "function initialize(string name, uint256 supply) external" into
    an ABI function entry.
    """
    head = SIGNATURE_HEAD.match(signature)
    if not head:
        raise ConfigurationError(f"Invalid fnSignature: {signature}")
    open_idx = head.end() - 1
    close_idx = _closing_paren(signature, open_idx)
    return {
        "type": "function",
        "name": head.group(1),
        "inputs": parse_params(signature[open_idx + 1:close_idx]),
    }


# ---------------------------
# Argument validation
# ---------------------------
def canonical_type(param):
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def check_arguments(inputs, args):
    """
    Reject coerced arguments web3's strict codec cannot encode. Runs before
    any transaction is estimated so a bad value never leaves a half-done deployment.
    """
    codec = Web3().codec
    for idx, (param, value) in enumerate(zip(inputs, args)):
        abi_type = canonical_type(param)
        check_type(abi_type)
        if not codec.is_encodable(abi_type, value):
            name = param.get("name") or f"arg{idx}"
            raise ArgumentTypeError(f"Value {value!r} for {name} is not a valid {abi_type}", abi_type)


def bind(fn, *args):
    """Call a web3 contract function or constructor with args, mapping encoding failures."""
    try:
        return fn(*args)
    except (Web3Exception, EncodingError, TypeError, ValueError) as e:
        raise ArgumentTypeError(f"Cannot encode arguments: {e}") from e


# ---------------------------
# Contract bindings
# ---------------------------
def encode_function(entry, args):
    """Call data for a single ABI function entry, without a node connection."""
    contract = Web3().eth.contract(abi=[entry])
    try:
        return contract.encode_abi(entry["name"], args=list(args))
    except (Web3Exception, EncodingError, TypeError, ValueError) as e:
        raise ArgumentTypeError(f"Cannot encode {entry['name']} call: {e}") from e


def factory_contract(w3, address):
    return w3.eth.contract(address=address, abi=constants.FACTORY_ABI)


def contract_type_hash(contract_type):
    """bytes32 type identifier: keccak256 of the UTF-8 type name."""
    return keccak(text=contract_type)


def deployed_proxy(factory, receipt):
    """
    Proxy address (third indexed argument) of the first ContractDeployed
    event in the receipt, or None. Logs of other events are skipped.
    """
    events = factory.events.ContractDeployed().process_receipt(receipt, errors=DISCARD)
    if not events:
        return None
    return events[0]["args"]["proxy"]
