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

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from web3 import Web3

from scfactory.errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY_FEE = Web3.to_wei(1, "gwei")


@dataclass(frozen=True)
class FeeData:
    fee_per_gas: int
    max_priority_fee_per_gas: Optional[int] = None

    @property
    def is_dynamic(self):
        return self.max_priority_fee_per_gas is not None


@dataclass(frozen=True)
class GasEstimate:
    gas: int
    fees: FeeData

    @property
    def cost_wei(self):
        return self.gas * self.fees.fee_per_gas

    def render(self):
        gwei = Web3.from_wei(self.fees.fee_per_gas, "gwei")
        cost = Web3.from_wei(self.cost_wei, "ether")
        return [
            f"Estimated gas: {self.gas} @ {_plain(gwei)} gwei",
            f"≈ {Decimal(cost):.6f} ETH",
        ]


def _plain(value):
    text = format(Decimal(value), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def get_fee_data(w3):
    """
    Max fee per gas (2 x base fee + priority fee) when the chain reports a
    base fee, the legacy gas price otherwise.
    """
    try:
        block = w3.eth.get_block("latest")
        base_fee = block.get("baseFeePerGas")
        if base_fee is None:
            return FeeData(fee_per_gas=int(w3.eth.gas_price))
        try:
            priority = int(w3.eth.max_priority_fee)
        except Exception as e:
            logger.debug("eth_maxPriorityFeePerGas unavailable (%s); using 1 gwei", e)
            priority = DEFAULT_PRIORITY_FEE
        return FeeData(
            fee_per_gas=int(base_fee) * 2 + priority,
            max_priority_fee_per_gas=priority,
        )
    except Exception as e:
        raise NetworkError(f"Error fetching fee data: {e}") from e


def estimate(w3, call, sender):
    """Estimate gas for a bound contract call sent by sender and price it with current fees."""
    try:
        gas = int(call.estimate_gas({"from": sender}))
    except Exception as e:
        raise NetworkError(f"Error estimating gas: {e}") from e
    fees = get_fee_data(w3)
    logger.debug("Estimated %d gas at %d wei/gas", gas, fees.fee_per_gas)
    return GasEstimate(gas=gas, fees=fees)
