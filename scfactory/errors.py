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

"""Exception classes raised by the SCFactory commands."""


class FactoryCLIError(Exception):
    """Base exception for every error the CLI reports to the user."""

    pass


class ConfigurationError(FactoryCLIError, ValueError):
    """Missing signing key, unresolved RPC URL, missing factory or bad CLI input."""

    pass


class NotFoundError(FactoryCLIError, LookupError):
    """Raised when no compiled artifact (or ABI entry) matches the request."""

    pass


class ArgumentTypeError(FactoryCLIError, TypeError):
    """Raised when an argument cannot be coerced to its declared ABI type."""

    def __init__(self, message, abi_type=None):
        super().__init__(message)
        self.abi_type = abi_type


class NetworkError(FactoryCLIError):
    """Gas estimation, fee lookup, submission or confirmation failed."""

    def __init__(self, message, tx_hash=None):
        super().__init__(message)
        self.tx_hash = tx_hash


class UserAbort(FactoryCLIError):
    """The user declined a confirmation prompt. Not a failure."""

    pass


class GaslessNotSupported(FactoryCLIError):
    """The relayed (gas-less) submission path is not available."""

    pass
