"""Utility helpers."""

from .env import setup_logging, DEFAULT_LOG_FILE

__all__ = ['setup_logging', 'DEFAULT_LOG_FILE']
