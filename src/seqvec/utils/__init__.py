"""Utility functions and helpers."""

from .timing import section_timer
from .logging import setup_logging

__all__ = [
    "section_timer",
    "setup_logging",
]
