"""
Utilities Module

This module contains shared configuration and logging helpers.
"""

from .config import Config
from .logging import setup_logging

__all__ = ["Config", "setup_logging"]
