"""
JSON Output Formatter for the VoucherView CLI

Machine-readable output for commands run with ``--json``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson
from pydantic import BaseModel


def _default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    msg = f"Type is not JSON serializable: {type(obj).__name__}"
    raise TypeError(msg)


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
) -> bytes:
    """
    Wrap command output in the JSON envelope.

    Args:
        success: False when the command failed
        command: The command name (e.g., "search", "window")
        data: Command payload; pydantic models are dumped by alias
        errors: Error messages, empty on success

    Returns:
        Indented UTF-8 JSON

    Example:
        >>> output = format_json_output(success=True, command="window", data={"start": 15, "end": 35})
        >>> print(output.decode())
        {
          "success": true,
          "command": "window",
          "timestamp": "2026-01-01T10:30:00Z",
          "data": {
            "start": 15,
            "end": 35
          },
          "errors": []
        }
    """
    output = {
        "success": success,
        "command": command,
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "data": data,
        "errors": errors or [],
    }
    return orjson.dumps(output, option=orjson.OPT_INDENT_2, default=_default)
