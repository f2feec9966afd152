"""ERC20 allowance management.

The spender is always approved for exactly the amount being swapped, never
an unlimited amount, and the current allowance is not read first.
"""

import logging
from decimal import Decimal

from web3.exceptions import ContractLogicError

from directswap.abi import encode_approve_call
from directswap.chain.rpc import ChainClient
from directswap.errors import ApprovalRejected, ApprovalSubmissionFailed
from directswap.models import ApprovalReceipt, UnsignedTransaction
from directswap.signing.base import SigningError, TransactionSigner
from directswap.utils.units import to_fixed_point

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_GAS_LIMIT = 100000


class AllowanceManager:
    """Authorizes the exchange contract to move the input token."""

    def __init__(
        self,
        chain: ChainClient,
        signer: TransactionSigner,
        gas_limit: int = DEFAULT_APPROVAL_GAS_LIMIT,
        wait_for_confirmation: bool = False,
        confirmation_timeout: float = 300.0,
        poll_interval: float = 2.0,
    ):
        """Initialize allowance manager.

        Args:
            chain: RPC access
            signer: Owner of the tokens
            gas_limit: Gas limit of the approval transaction
            wait_for_confirmation: Block until the approval is mined. When
                False the swap is sent right behind it using the pending nonce.
            confirmation_timeout: Seconds to wait when waiting is enabled
            poll_interval: Receipt polling interval
        """
        self.chain = chain
        self.signer = signer
        self.gas_limit = gas_limit
        self.wait_for_confirmation = wait_for_confirmation
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

    async def approve(
        self,
        token_address: str,
        spender: str,
        amount: Decimal,
        decimals: int,
        gas_price: int,
    ) -> ApprovalReceipt:
        """Approve spender for amount of token, scaled to the token's decimals.

        Args:
            token_address: ERC20 contract of the input asset
            spender: Exchange contract address
            amount: Human amount being swapped
            decimals: Native decimals of the token
            gas_price: Gas price in wei

        Returns:
            ApprovalReceipt carrying the nonce the approval consumed

        Raises:
            ApprovalSubmissionFailed: Transaction could not be signed or broadcast
            ApprovalRejected: The approve call reverts (or returns false) when
                simulated, or the mined receipt has status 0 when waiting
            ChainQueryFailed: Chain id, nonce or simulation query failed
        """
        owner = self.signer.address
        units = to_fixed_point(amount, decimals)

        logger.info(f"Increasing allowance of {spender} on {token_address} to {units}...")

        tx = UnsignedTransaction(to=token_address, data=encode_approve_call(spender, units))
        tx.chain_id = self.chain.get_chain_id()
        tx.gas_price = gas_price
        tx.gas_limit = self.gas_limit
        tx.nonce = self.chain.get_pending_nonce(owner)
        tx.from_address = owner
        tx_params = tx.to_tx_params()

        # Broadcasting never executes the call, so a revert must be caught here
        try:
            result = self.chain.simulate(tx_params)
        except ContractLogicError as e:
            raise ApprovalRejected(f"approve on {token_address} reverts", cause=e) from e
        if len(result) == 32 and int.from_bytes(result, "big") == 0:
            raise ApprovalRejected(f"approve on {token_address} returned false")

        try:
            raw_tx = self.signer.sign_transaction(tx_params)
        except SigningError as e:
            raise ApprovalSubmissionFailed("Could not sign approval transaction", cause=e) from e

        try:
            tx_hash = self.chain.send_raw_transaction(raw_tx)
        except Exception as e:
            raise ApprovalSubmissionFailed("Could not broadcast approval transaction", cause=e) from e

        logger.info(f"Approval tx: {tx_hash} (nonce {tx.nonce})")

        confirmed = False
        if self.wait_for_confirmation:
            receipt = await self.chain.wait_for_receipt(
                tx_hash, timeout=self.confirmation_timeout, poll_interval=self.poll_interval
            )
            if receipt.get("status") == 0:
                raise ApprovalRejected(f"Approval {tx_hash} reverted on-chain", tx_hash=tx_hash)
            confirmed = True
            logger.info(f"Approval confirmed in block {receipt.get('blockNumber')}")

        return ApprovalReceipt(
            tx_hash=tx_hash,
            nonce=tx.nonce,
            token_address=token_address,
            spender=spender,
            amount=units,
            confirmed=confirmed,
        )
