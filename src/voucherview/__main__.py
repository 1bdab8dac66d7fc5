"""
VoucherView Package Main Entry Point

Runs the CLI when the package is executed with ``python -m voucherview``.
"""

import logging
import sys

from voucherview.cli.error_handler import handle_cli_error
from voucherview.cli.typer_app import app
from voucherview.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_ERROR)
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        sys.exit(handle_cli_error(e, "voucherview-main"))


if __name__ == "__main__":
    main()
