"""Shared utilities and helpers."""
from shared.diagnostics import get_memory_info, log_memory_usage
from shared.progress import ConsoleProgress, SingleLineRenderer

__all__ = [
    'ConsoleProgress',
    'SingleLineRenderer',
    'get_memory_info',
    'log_memory_usage',
]
