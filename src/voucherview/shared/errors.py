"""VoucherView error types.

Every failure raised inside the package is a ``VoucherViewError`` carrying
an ``ErrorCode`` and an ``ErrorContext``. Components raise; the controller
and the CLI decide what the user sees. The underlying exception, if any,
travels along as ``original_error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

PrimitiveContextValue = Union[str, int, float, bool]

# Never written to logs or JSON output
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("user_id",)


class ErrorCode(str, Enum):
    """All error codes used by VoucherView."""

    # Remote collection source
    NETWORK_ERROR = "NETWORK_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    REMOTE_FETCH_FAILED = "REMOTE_FETCH_FAILED"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"

    # Durable mirror
    DURABLE_READ_FAILED = "DURABLE_READ_FAILED"
    DURABLE_WRITE_FAILED = "DURABLE_WRITE_FAILED"
    DURABLE_QUOTA_EXCEEDED = "DURABLE_QUOTA_EXCEEDED"

    # Cache
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Records and queries
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_RECORD = "INVALID_RECORD"

    # Construction preconditions
    CONFIG_ERROR = "CONFIG_ERROR"
    SURFACE_NOT_FOUND = "SURFACE_NOT_FOUND"
    INVALID_VIEWPORT_GEOMETRY = "INVALID_VIEWPORT_GEOMETRY"
    RENDERER_DESTROYED = "RENDERER_DESTROYED"

    # Orchestration and entry points
    APPLICATION_ERROR = "APPLICATION_ERROR"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _to_primitive(name: str, value: Any) -> PrimitiveContextValue:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    msg = f"Context value '{name}' has unsupported type {type(value).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    ``additional_data`` is restricted to primitives so the context can be
    logged and serialized as-is; paths, enums and decimals are converted on
    construction, anything else raises ``TypeError``.

    Attributes:
        operation: Name of the failing operation.
        key: Cache key or collection id involved.
        user_id: Acting user; masked by ``safe_dict``.
        additional_data: Extra primitive fields.
    """

    operation: str | None = None
    key: str | None = None
    user_id: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is None:
            return
        if not isinstance(self.additional_data, dict):
            msg = f"additional_data must be a dict, not {type(self.additional_data).__name__}"
            raise TypeError(msg)
        converted = {name: _to_primitive(name, value) for name, value in self.additional_data.items()}
        object.__setattr__(self, "additional_data", converted)

    def safe_dict(self, *, mask_keys: tuple[str, ...] = SAFE_DICT_MASK_KEYS) -> dict[str, Any]:
        """Context as a dict without masked fields.

        ``additional_data`` is always present, empty when unset.

        >>> ErrorContext(key="vouchers", user_id="u-1").safe_dict()
        {'key': 'vouchers', 'additional_data': {}}
        """
        fields = {"operation": self.operation, "key": self.key, "user_id": self.user_id}
        data: dict[str, Any] = {
            name: value for name, value in fields.items() if value is not None and name not in mask_keys
        }
        data["additional_data"] = dict(self.additional_data or {}) if "additional_data" not in mask_keys else {}
        return data


class VoucherViewError(Exception):
    """Base class of every VoucherView error.

    Args:
        code: What went wrong.
        message: Human-readable description.
        context: Where it went wrong.
        original_error: Exception that caused this one.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form with the context already masked."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": None if self.original_error is None else str(self.original_error),
        }


class DomainError(VoucherViewError):
    """A record or query that cannot be accepted."""


class InfrastructureError(VoucherViewError):
    """Failure talking to the remote source or the durable store."""


class RemoteSourceError(InfrastructureError):
    """Remote collection fetch or mutation failed.

    Propagates out of ``CacheStore.get_or_load``; the caller may retry.
    """


class DurableStoreError(InfrastructureError):
    """Durable key-value store failure.

    Never escapes the cache store: logged and ignored there.
    """


class ConfigurationError(VoucherViewError):
    """Invalid configuration or missing collaborator, raised at construction."""


class ApplicationError(VoucherViewError):
    """Misuse of the orchestration layer."""


def create_remote_error(
    message: str,
    collection_id: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> RemoteSourceError:
    """RemoteSourceError for ``collection_id`` with REMOTE_FETCH_FAILED."""
    return RemoteSourceError(
        ErrorCode.REMOTE_FETCH_FAILED,
        message,
        ErrorContext(operation=operation, key=collection_id),
        original_error,
    )


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    extra: dict[str, PrimitiveContextValue] | None = {"field": field} if field else None
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        ErrorContext(operation=operation, additional_data=extra),
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    code: ErrorCode = ErrorCode.CONFIG_ERROR,
    original_error: Exception | None = None,
) -> ConfigurationError:
    """ConfigurationError naming the offending setting or file in its context."""
    extra: dict[str, PrimitiveContextValue] | None = {"config_key": config_key} if config_key else None
    return ConfigurationError(
        code,
        message,
        ErrorContext(operation=operation, additional_data=extra),
        original_error,
    )
