"""JSON-RPC access to the EVM chain.

Thin wrapper over web3 exposing the operations the pipeline needs:
chain id, pending nonce, call simulation, raw transaction broadcast and
receipt polling.
"""

import asyncio
import logging
from typing import Optional

from web3 import Web3
from web3.exceptions import ContractLogicError, TransactionNotFound

from directswap.errors import ChainQueryFailed, ConfirmationTimeout

logger = logging.getLogger(__name__)


class ChainClient:
    """EVM chain access through a single RPC endpoint."""

    def __init__(self, rpc_url: str, web3: Optional[Web3] = None):
        self.rpc_url = rpc_url
        self._web3 = web3
        self._chain_id: Optional[int] = None

    @property
    def web3(self) -> Web3:
        """Lazy load web3 instance."""
        if self._web3 is None:
            self._web3 = Web3(Web3.HTTPProvider(self.rpc_url))
        return self._web3

    def get_chain_id(self) -> int:
        """Get the connected network's chain id (cached after first query)."""
        if self._chain_id is None:
            try:
                self._chain_id = int(self.web3.eth.chain_id)
            except Exception as e:
                raise ChainQueryFailed("Failed to query chain id", cause=e) from e
            logger.debug(f"Connected to chain {self._chain_id} via {self.rpc_url}")
        return self._chain_id

    def get_pending_nonce(self, address: str) -> int:
        """Get the account's transaction count including pending transactions."""
        try:
            return int(self.web3.eth.get_transaction_count(Web3.to_checksum_address(address), "pending"))
        except Exception as e:
            raise ChainQueryFailed(f"Failed to query pending nonce of {address}", cause=e) from e

    def simulate(self, tx_params: dict) -> bytes:
        """Execute a transaction as an eth_call against the latest block.

        Nothing is broadcast. Only from/to/data/value are sent, so gas and
        nonce do not affect the result.

        Returns:
            Raw return data of the call

        Raises:
            ContractLogicError: The call reverts
            ChainQueryFailed: The node could not be queried
        """
        call = {key: tx_params[key] for key in ("from", "to", "data", "value") if key in tx_params}
        try:
            return bytes(self.web3.eth.call(call, "latest"))
        except ContractLogicError:
            raise
        except Exception as e:
            raise ChainQueryFailed(f"Failed to simulate call to {call.get('to')}", cause=e) from e

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction and return its 0x-prefixed hash.

        Node errors propagate unchanged; callers map them to their stage.
        """
        tx_hash = self.web3.eth.send_raw_transaction(raw_transaction)
        return Web3.to_hex(tx_hash)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 300.0,
        poll_interval: float = 2.0,
        confirmations: int = 1,
    ) -> dict:
        """Wait for a transaction to be mined.

        Args:
            tx_hash: Transaction hash to wait for
            timeout: Maximum seconds to wait (0 = wait forever)
            poll_interval: Seconds between receipt queries
            confirmations: Number of block confirmations required

        Returns:
            Transaction receipt dict (status is not checked here)

        Raises:
            ConfirmationTimeout: If the transaction is not mined within timeout
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        while True:
            try:
                receipt = self.web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
            except Exception as e:
                # Polling only observes; the transaction is already broadcast
                logger.warning(f"Receipt query for {tx_hash} failed: {type(e).__name__}: {e}")
                receipt = None

            if receipt is not None:
                receipt = dict(receipt)
                if confirmations <= 1:
                    return receipt
                try:
                    current_block = self.web3.eth.block_number
                except Exception as e:
                    logger.warning(f"Block number query failed: {type(e).__name__}: {e}")
                    current_block = None
                if current_block is not None and current_block - receipt["blockNumber"] + 1 >= confirmations:
                    return receipt

            elapsed = loop.time() - start_time
            if timeout and elapsed > timeout:
                raise ConfirmationTimeout(
                    f"Transaction {tx_hash} not confirmed after {timeout}s",
                    tx_hash=tx_hash,
                    timeout=timeout,
                )

            await asyncio.sleep(poll_interval)
