"""
VoucherView Constants Module

Centralized constants so that magic values live in one place.
"""

from .cache import CacheDefaults, CacheKeys, CacheValidationConstants
from .cli import CLICommands, CLIDefaults, CLIHelp
from .query import QueryDefaults, QueryMessages
from .viewport import RecordPlaceholders, ViewportDefaults

__all__ = [
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CacheDefaults",
    "CacheKeys",
    "CacheValidationConstants",
    "QueryDefaults",
    "QueryMessages",
    "RecordPlaceholders",
    "ViewportDefaults",
]
