"""
Core utilities package.
"""

from kubesnoop.core.utils.logging import configure_logging, log_operation

__all__ = [
    "configure_logging",
    "log_operation",
]
