"""CLI utility functions"""

from .output import console, format_reconcile_result, format_error

__all__ = [
    'console',
    'format_reconcile_result',
    'format_error',
]
