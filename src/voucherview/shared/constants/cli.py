"""
CLI Constants
"""


class CLIDefaults:
    """Default values for CLI operations."""

    APP_NAME = "voucherview"
    VERSION = "0.1.0"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    DEFAULT_CACHE_DIR = ".voucherview/cache"
    LOG_LEVEL = "WARNING"


class CLIHelp:
    """Help text for CLI commands and options."""

    APP_DESCRIPTION = "Inspect the voucher cache, search records and preview viewport windows."
    SEARCH_HELP = "Search a JSON file of voucher records."
    SEARCH_RECORDS_HELP = "Path to a JSON array of records"
    SEARCH_QUERY_HELP = "Free-text query"
    SEARCH_FIELD_HELP = "Record field to match (repeatable)"
    SEARCH_CEILING_HELP = "Maximum number of results"
    JSON_OUTPUT_HELP = "Output results in JSON format"
    WINDOW_HELP = "Compute the visible index range for a viewport."
    CACHE_HELP = "Manage the durable cache mirror."
    CACHE_DIR_HELP = "Durable cache directory"
    LOG_LEVEL_HELP = "Logging level"
    GUI_HELP = "Open the record list window for a JSON file of records."
    CONFIG_HELP = "Path to a TOML configuration file"
    VERSION_HELP = "Show version information and exit"
    VERSION_TEXT = "VoucherView CLI v{version}"


class CLICommands:
    """CLI command names."""

    SEARCH = "search"
    WINDOW = "window"
    CACHE = "cache"
    CACHE_STATS = "stats"
    CACHE_CLEAR = "clear"
    GUI = "gui"
