"""
Utilities package for fieldledger.

Exports shared helpers for logging and record field access. Keep this
package lightweight and free of domain-specific logic.
"""

from fieldledger.utils.fields import get_field
from fieldledger.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "get_field",
]
