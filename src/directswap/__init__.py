"""directswap - single-hop token swap through a trading backend and the pools."""

__version__ = "0.1.0"
