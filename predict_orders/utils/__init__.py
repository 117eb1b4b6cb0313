"""Utility modules for predict-orders.

Sub-modules:
- logging: configure_logging() for structlog setup
- precision: fixed-point truncation and wei scaling
"""

from .logging import configure_logging
from .precision import retain_significant_digits, to_wei

__all__ = [
    "configure_logging",
    "retain_significant_digits",
    "to_wei",
]
