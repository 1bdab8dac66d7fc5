"""
Viewport Renderer Constants
"""


class ViewportDefaults:
    """Defaults for windowed rendering."""

    ITEM_HEIGHT = 60
    BUFFER_SIZE = 5
    # Re-render once the scroll offset moved by more than this fraction of a row
    SCROLL_THRESHOLD_RATIO = 0.5


class RecordPlaceholders:
    """Display placeholders for missing record fields."""

    TEXT = "Unknown"
    VOUCHER_NUMBER = "N/A"
    DATE = "No Date"
    AMOUNT = 0
