"""
VoucherView - cached, searchable, windowed voucher lists.

A TTL cache in front of a remote document collection, a debounced
substring search over the cached records, and a viewport renderer that
mounts only the rows in view.
"""

from voucherview.shared.constants import CLIDefaults

__version__ = CLIDefaults.VERSION
__author__ = "VoucherView Team"
