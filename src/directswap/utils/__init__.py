"""Utility modules for directswap."""

from directswap.utils.units import from_fixed_point, to_decimal, to_fixed_point

__all__ = ["from_fixed_point", "to_decimal", "to_fixed_point"]
