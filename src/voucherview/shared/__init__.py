"""VoucherView Shared Module.

This package contains shared constants, models, protocols and error handling
used across VoucherView.
"""

__all__ = ["constants", "errors", "logging", "models", "protocols"]
