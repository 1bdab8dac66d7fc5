"""
CLI error reporting

Maps exceptions raised by commands to exit codes and user-facing output.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from voucherview.cli.json_formatter import format_json_output
from voucherview.shared.constants import CLIDefaults
from voucherview.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    VoucherViewError,
)
from voucherview.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log ``error``, report it to the user and return the exit code.

    Args:
        error: Exception raised by the command
        command: Command name, recorded as the operation
        json_output: Print a JSON error envelope on stdout

    Returns:
        Process exit code
    """
    if isinstance(error, VoucherViewError):
        typed_error = error
    else:
        typed_error = ApplicationError(
            ErrorCode.CLI_UNEXPECTED_ERROR,
            f"Unexpected error: {error!s}",
            ErrorContext(operation=command),
            original_error=error,
        )
    log_operation_error(logger, typed_error, operation=command)

    if json_output:
        output = format_json_output(
            success=False,
            command=command,
            errors=[str(typed_error)],
        )
        typer.echo(output.decode("utf-8"))
    else:
        error_console.print(f"[red]Error:[/red] {typed_error.message}")

    return CLIDefaults.EXIT_ERROR
