"""Swap transaction assembly.

The exchange contract is the entry point: it calls the executor with the
backend's swapDescription and calldata. The gas limit is a configured
constant, not an estimate.
"""

import logging

from directswap.abi import encode_swap_call
from directswap.chain.rpc import ChainClient
from directswap.errors import CalldataGenerationFailed, ChainQueryFailed
from directswap.models import (
    ApprovalReceipt,
    SwapExecutionPayload,
    TradingInfo,
    UnsignedTransaction,
)

logger = logging.getLogger(__name__)

# Covers the worst case of a swap through the pools
SWAP_GAS_LIMIT = 600000

# Auxiliary permit bytes passed to the exchange (unused)
EMPTY_PERMIT = b""


class TransactionAssembler:
    """Builds the unsigned swap transaction."""

    def __init__(self, chain: ChainClient, sender: str, gas_limit: int = SWAP_GAS_LIMIT):
        self.chain = chain
        self.sender = sender
        self.gas_limit = gas_limit

    def assemble(
        self,
        info: TradingInfo,
        payload: SwapExecutionPayload,
        gas_price: int,
        approval: ApprovalReceipt,
    ) -> UnsignedTransaction:
        """Assemble the swap transaction.

        The approval receipt is required: the swap nonce is queried only
        after the approval was broadcast and must be exactly approval.nonce + 1.

        Raises:
            ChainQueryFailed: RPC query failed, or the pending nonce does not
                follow the approval nonce
        """
        try:
            data = encode_swap_call(
                info.swap_executor_contract_address,
                payload.swap_description,
                EMPTY_PERMIT,
                payload.calldata,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CalldataGenerationFailed("Backend payload cannot be ABI encoded", cause=e) from e

        tx = UnsignedTransaction(to=info.exchange_contract_address, data=data, value=0)
        tx.chain_id = self.chain.get_chain_id()
        tx.gas_price = int(gas_price)
        tx.from_address = self.sender
        tx.gas_limit = self.gas_limit
        tx.nonce = self._next_nonce(approval)

        logger.debug(
            f"Assembled swap tx: to={tx.to} chainId={tx.chain_id} nonce={tx.nonce} "
            f"gas={tx.gas_limit} gasPrice={tx.gas_price}"
        )
        return tx

    def _next_nonce(self, approval: ApprovalReceipt) -> int:
        pending = self.chain.get_pending_nonce(self.sender)
        expected = approval.next_nonce

        if pending == expected:
            return pending

        if pending == approval.nonce:
            # Node has not indexed the approval in its pending pool yet
            logger.warning(
                f"Pending nonce {pending} does not include approval {approval.tx_hash}, using {expected}"
            )
            return expected

        raise ChainQueryFailed(
            f"Pending nonce {pending} does not follow approval nonce {approval.nonce}; "
            f"another transaction from {self.sender} may be in flight"
        )
