"""Shared utilities and helpers."""
from shared.progress import ConsoleProgress

__all__ = [
    'ConsoleProgress',
]
