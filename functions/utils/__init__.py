"""Utility modules for BlockPlane functions."""

from utils.logging_config import configure_logging
from utils.numeric import ieee_divide, plain_number, round_half_up

__all__ = [
    "configure_logging",
    "ieee_divide",
    "plain_number",
    "round_half_up",
]
