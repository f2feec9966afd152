"""Blockchain RPC access."""

from directswap.chain.rpc import ChainClient

__all__ = ["ChainClient"]
