"""Shared utilities: logging setup and id generation.

Used by core and infrastructure. No business logic.
"""

from app.shared.logging import RequestIdLogFilter, setup_logging
from app.shared.utils import generate_cuid

__all__ = [
    "RequestIdLogFilter",
    "generate_cuid",
    "setup_logging",
]
