"""Swap execution pipeline.

Provides:
- SwapExecutor: runs one swap intent end to end
- Stage components: QuoteResolver, AllowanceManager, build_swap_request,
  CalldataGenerator, TransactionAssembler, TransactionSubmitter
"""

from directswap.swap.allowance import AllowanceManager
from directswap.swap.assembler import TransactionAssembler
from directswap.swap.calldata import CalldataGenerator
from directswap.swap.executor import SwapExecutor, get_swap_executor
from directswap.swap.quote import QuoteResolver
from directswap.swap.request_builder import build_swap_request
from directswap.swap.submitter import TransactionSubmitter

__all__ = [
    # Executor
    "SwapExecutor",
    "get_swap_executor",
    # Stages
    "AllowanceManager",
    "CalldataGenerator",
    "QuoteResolver",
    "TransactionAssembler",
    "TransactionSubmitter",
    "build_swap_request",
]
