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
Transaction submission.

Every state-changing call is a bound web3 contract function or constructor
and goes through Deployer.transact():
  1. estimate gas and fees for the call and print the cost
  2. ask for confirmation (a "no" raises UserAbort, nothing is sent)
  3. sign locally with the PRIVATE_KEY account and send the raw transaction
  4. wait for the receipt and fail on a reverted status
"""

import logging

from eth_account import Account
from eth_utils import to_hex
from web3 import Web3
from web3.exceptions import Web3Exception

from scfactory import estimator
from scfactory.config import require_private_key, resolve_rpc
from scfactory.errors import NetworkError, UserAbort

logger = logging.getLogger(__name__)


def connect(chain_id, settings):
    """Web3 over HTTP for the chain; raises ConfigurationError if no RPC resolves."""
    rpc_url = resolve_rpc(chain_id, settings)
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not w3.is_connected():
        raise NetworkError(f"Unable to connect to RPC at {rpc_url}")
    return w3


class Deployer:
    def __init__(self, w3, account, prompter):
        self.w3 = w3
        self.account = account
        self.prompter = prompter

    @classmethod
    def from_settings(cls, chain_id, settings, prompter):
        # The key is checked before any network access.
        key = require_private_key(settings)
        w3 = connect(chain_id, settings)
        return cls(w3, Account.from_key(key), prompter)

    @property
    def address(self):
        return self.account.address

    def estimate(self, call):
        return estimator.estimate(self.w3, call, self.address)

    def build_transaction(self, call, gas_estimate):
        try:
            params = {
                "from": self.address,
                "value": 0,
                "gas": gas_estimate.gas,
                "nonce": self.w3.eth.get_transaction_count(self.address, "pending"),
                "chainId": int(self.w3.eth.chain_id),
            }
        except Exception as e:
            raise NetworkError(f"Error preparing transaction: {e}") from e
        fees = gas_estimate.fees
        if fees.is_dynamic:
            params["maxFeePerGas"] = fees.fee_per_gas
            params["maxPriorityFeePerGas"] = fees.max_priority_fee_per_gas
        else:
            params["gasPrice"] = fees.fee_per_gas
        # Every fee field is set, so web3 fills nothing from the node here.
        try:
            return call.build_transaction(params)
        except Web3Exception as e:
            raise NetworkError(f"Error preparing transaction: {e}") from e

    def send(self, tx):
        """Sign, submit and wait. Returns (tx_hash hex, receipt)."""
        try:
            signed = self.account.sign_transaction(tx)
        except (TypeError, ValueError) as e:
            raise NetworkError(f"Error signing transaction: {e}") from e
        try:
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise NetworkError(f"Error sending transaction: {e}") from e
        tx_hash = to_hex(tx_hash)
        print("Transaction sent. Hash:", tx_hash)
        print("Waiting for transaction confirmation...")
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            raise NetworkError(f"Error waiting for confirmation: {e}", tx_hash=tx_hash) from e
        if receipt.get("status") == 0:
            raise NetworkError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash)
        logger.debug("Transaction %s mined in block %s", tx_hash, receipt.get("blockNumber"))
        return tx_hash, receipt

    def transact(self, call, action):
        """Estimate, confirm and send one bound contract call or constructor."""
        gas_estimate = self.estimate(call)
        for line in gas_estimate.render():
            print(line)
        if not self.prompter.confirm(f"Continue with {action}?", default=True):
            raise UserAbort("Aborted by user.")
        tx = self.build_transaction(call, gas_estimate)
        return self.send(tx)
