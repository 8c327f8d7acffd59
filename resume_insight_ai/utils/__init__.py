"""Utility exports."""

from .helpers import dedupe_preserving_order, digits_only, round_half_up
from .logger import get_logger

__all__ = [
    "get_logger",
    "dedupe_preserving_order",
    "digits_only",
    "round_half_up",
]
