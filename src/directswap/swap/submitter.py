"""Signing, broadcast and confirmation of the swap transaction."""

import logging

from directswap.chain.rpc import ChainClient
from directswap.errors import SubmissionRejected, TransactionReverted
from directswap.models import TransactionReceipt, UnsignedTransaction
from directswap.signing.base import SigningError, TransactionSigner

logger = logging.getLogger(__name__)


class TransactionSubmitter:
    """Signs, broadcasts and waits for one confirmation."""

    def __init__(
        self,
        chain: ChainClient,
        signer: TransactionSigner,
        confirmation_timeout: float = 300.0,
        poll_interval: float = 2.0,
    ):
        self.chain = chain
        self.signer = signer
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

    def broadcast(self, tx: UnsignedTransaction) -> str:
        """Sign and send a transaction.

        Returns:
            Transaction hash

        Raises:
            SubmissionRejected: Signing failed or the node refused the transaction
                (nonce conflict, insufficient funds for gas, ...)
        """
        try:
            raw_tx = self.signer.sign_transaction(tx.to_tx_params())
        except (SigningError, ValueError) as e:
            raise SubmissionRejected("Could not sign swap transaction", cause=e) from e

        logger.info("Sending swap tx...")
        try:
            return self.chain.send_raw_transaction(raw_tx)
        except Exception as e:
            raise SubmissionRejected("Node rejected swap transaction", cause=e) from e

    async def submit(self, tx: UnsignedTransaction) -> TransactionReceipt:
        """Broadcast a transaction and wait until it is mined.

        Raises:
            SubmissionRejected: Broadcast refused
            TransactionReverted: Mined with status 0 (e.g. minimum return not met)
            ConfirmationTimeout: Not mined within confirmation_timeout
        """
        tx_hash = self.broadcast(tx)
        logger.info(f"Tx was sent {tx_hash} | waiting for confirmation...")

        raw_receipt = await self.chain.wait_for_receipt(
            tx_hash, timeout=self.confirmation_timeout, poll_interval=self.poll_interval
        )
        receipt = TransactionReceipt.from_web3(tx_hash, raw_receipt)

        if not receipt.succeeded:
            raise TransactionReverted(
                f"Swap {tx_hash} reverted in block {receipt.block_number}",
                tx_hash=tx_hash,
                receipt=raw_receipt,
            )

        logger.info(f"Swap confirmed in block {receipt.block_number} (gas used {receipt.gas_used})")
        return receipt
