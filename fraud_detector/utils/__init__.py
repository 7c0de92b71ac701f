"""Utility modules for the fraud detector."""

from .config import Config, deep_merge
from .logging import setup_logging

__all__ = ['Config', 'deep_merge', 'setup_logging']
