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
Constructor / initializer argument collection.

Arguments come from a JSON array on the command line. When the count does not
match the ABI, every parameter is asked for interactively. Values are coerced
according to the declared ABI type:

  uint*/int*    decimal or 0x-hex text -> int (no float rounding)
  bool          true/false/1/0/yes/no
  address       checksummed
  bytes*        0x-hex text -> bytes
  string        passed through
  T[] / T[k]    JSON list or "[a,b,c]" text
  tuple         JSON list/object or "(a,b,(c,d))" text
"""

import json
import logging
import re

from eth_utils import is_address, is_hex, to_bytes, to_checksum_address

from scfactory.errors import ArgumentTypeError, ConfigurationError

logger = logging.getLogger(__name__)

ARRAY_SUFFIX = re.compile(r"^(.*)\[(\d*)\]$")
OPENERS = {"(": ")", "[": "]"}
CLOSERS = {")", "]"}


# ---------------------------
# Tokenizer / decoder for composite text values
# ---------------------------
def tokenize(text):
    """
    Split text into ("open", ch), ("close", ch), ("comma", ",") and ("atom", value).
    Double-quoted atoms keep commas and brackets; \\" and \\\\ are unescaped.
    """
    tokens = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in OPENERS:
            tokens.append(("open", ch))
            i += 1
        elif ch in CLOSERS:
            tokens.append(("close", ch))
            i += 1
        elif ch == ",":
            tokens.append(("comma", ch))
            i += 1
        elif ch in "\"'":
            quote = ch
            i += 1
            buf = []
            while i < n and text[i] != quote:
                if text[i] == "\\" and i + 1 < n:
                    i += 1
                buf.append(text[i])
                i += 1
            if i >= n:
                raise ArgumentTypeError(f"Unterminated string in {text!r}")
            i += 1
            tokens.append(("atom", "".join(buf)))
        else:
            start = i
            while i < n and text[i] not in OPENERS and text[i] not in CLOSERS and text[i] != ",":
                i += 1
            tokens.append(("atom", text[start:i].strip()))
    return tokens


class _Decoder:
    def __init__(self, text):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return (None, None)

    def take(self):
        token = self.peek()
        self.pos += 1
        return token

    def fail(self, message):
        raise ArgumentTypeError(f"{message} in {self.text!r}")

    def value(self):
        kind, val = self.peek()
        if kind == "open":
            return self.sequence()
        if kind == "atom":
            self.take()
            return val
        self.fail("Expected a value")

    def sequence(self):
        _, opener = self.take()
        items = []
        if self.peek() == ("close", OPENERS[opener]):
            self.take()
            return items
        while True:
            items.append(self.value())
            kind, val = self.take()
            if kind == "comma":
                continue
            if kind == "close" and val == OPENERS[opener]:
                return items
            self.fail(f"Expected ',' or '{OPENERS[opener]}'")

    def document(self):
        result = self.value()
        if self.pos != len(self.tokens):
            self.fail("Unexpected trailing input")
        return result


def decode_composite(text):
    """Decode "(a,[b,c],\"d,e\")" into nested lists of strings."""
    return _Decoder(text).document()


# ---------------------------
# Type coercion
# ---------------------------
def _to_int(value, abi_type):
    if isinstance(value, bool):
        raise ArgumentTypeError(f"Expected an integer for {abi_type}, got {value!r}", abi_type)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            pass
    raise ArgumentTypeError(f"Expected an integer for {abi_type}, got {value!r}", abi_type)


def _to_bool(value, abi_type):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    raise ArgumentTypeError(f"Expected a boolean for {abi_type}, got {value!r}", abi_type)


def _to_address(value, abi_type):
    if isinstance(value, str) and is_address(value.strip()):
        return to_checksum_address(value.strip())
    raise ArgumentTypeError(f"Expected an address, got {value!r}", abi_type)


def _to_bytes(value, abi_type):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str) and is_hex(value.strip()):
        return to_bytes(hexstr=value.strip())
    raise ArgumentTypeError(f"Expected 0x-prefixed hex for {abi_type}, got {value!r}", abi_type)


def _as_sequence(value, abi_type):
    if isinstance(value, str):
        text = value.strip()
        # Brackets around the outermost level are optional: "a,b" == "(a,b)"
        if not text.startswith(tuple(OPENERS)):
            text = f"({text})"
        value = decode_composite(text)
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ArgumentTypeError(f"Expected a list for {abi_type}, got {value!r}", abi_type)


def coerce_value(param, value):
    """Coerce a raw CLI/JSON value to what the ABI encoder expects for param."""
    abi_type = param["type"]

    array = ARRAY_SUFFIX.match(abi_type)
    if array:
        inner = dict(param, type=array.group(1))
        items = _as_sequence(value, abi_type)
        if array.group(2) and len(items) != int(array.group(2)):
            raise ArgumentTypeError(
                f"{abi_type} expects {array.group(2)} element(s), got {len(items)}", abi_type
            )
        return [coerce_value(inner, item) for item in items]

    if abi_type == "tuple":
        components = param.get("components") or []
        if isinstance(value, dict):
            value = [value.get(c.get("name")) for c in components]
        items = _as_sequence(value, abi_type)
        if len(items) != len(components):
            raise ArgumentTypeError(
                f"tuple expects {len(components)} field(s), got {len(items)}", abi_type
            )
        return tuple(coerce_value(c, v) for c, v in zip(components, items))

    if abi_type.startswith(("uint", "int")):
        return _to_int(value, abi_type)
    if abi_type == "bool":
        return _to_bool(value, abi_type)
    if abi_type == "address":
        return _to_address(value, abi_type)
    if abi_type.startswith("bytes"):
        return _to_bytes(value, abi_type)
    if abi_type == "string":
        return value if isinstance(value, str) else json.dumps(value)
    raise ArgumentTypeError(f"Unsupported type {abi_type}", abi_type)


# ---------------------------
# Collection
# ---------------------------
def parse_json_args(raw, option="--args"):
    """Decode a JSON array given on the command line."""
    if raw is None or raw == "":
        return []
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise ConfigurationError(f"{option} is not valid JSON: {e}") from None
    if not isinstance(value, list):
        raise ConfigurationError(f"{option} must be a JSON array")
    return value


def collect_arguments(inputs, supplied, prompter, label="constructor"):
    """
    Return a typed argument list for the ABI inputs. If the supplied list has
    the wrong length every parameter is prompted for; a blank answer is asked
    again unless the parameter is a string.
    """
    if len(supplied) == len(inputs):
        return [coerce_value(p, v) for p, v in zip(inputs, supplied)]

    if not inputs:
        logger.warning("Ignoring %d argument(s): %s takes none", len(supplied), label)
        return []

    print(f"Detected {label} requires {len(inputs)} argument(s).")
    args = []
    for idx, param in enumerate(inputs):
        name = param.get("name") or f"arg{idx}"
        message = f'Enter value for {label} parameter "{name}" ({param["type"]})'
        raw = prompter.ask(message)
        while param["type"] != "string" and not str(raw).strip():
            print("A value is required.")
            raw = prompter.ask(message)
        args.append(coerce_value(param, raw))
    return args
