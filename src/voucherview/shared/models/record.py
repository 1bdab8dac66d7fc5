"""Voucher record model.

Records arrive from the remote document store as loosely shaped dicts with
camelCase keys. They are validated once here, at ingestion; search and
rendering code read fields from the validated model.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date as date_type
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from voucherview.shared.constants import RecordPlaceholders
from voucherview.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
)
from voucherview.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class Record(BaseModel):
    """A single voucher entity.

    Every field apart from ``id`` is optional. Unknown fields sent by the
    remote store are kept as extras so nothing is lost on round trips.

    Attributes:
        id: Stable document identifier.
        customer_name: Customer name.
        phone_model: Device model left for repair.
        phone_color: Device color.
        voucher_number: Printed voucher number, the default search field.
        amount: Charged amount; unparseable values read as missing.
        date: Business date as entered on the form.
        technician_name: Assigned technician.
        taken_by_customer: Whether the device was collected.
        timestamp: Creation time as reported by the store.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: str = Field(..., min_length=1, description="Stable document identifier")
    customer_name: str | None = Field(default=None, alias="customerName")
    phone_model: str | None = Field(default=None, alias="phoneModel")
    phone_color: str | None = Field(default=None, alias="phoneColor")
    voucher_number: str | None = Field(default=None, alias="voucherNumber")
    amount: float | None = Field(default=None)
    date: str | None = Field(default=None)
    technician_name: str | None = Field(default=None, alias="technicianName")
    taken_by_customer: bool = Field(default=False, alias="takenByCustomer")
    timestamp: str | None = Field(default=None)

    @field_validator("id", "voucher_number", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Voucher numbers are often typed in as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float | None:
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("date", "timestamp", mode="before")
    @classmethod
    def _coerce_temporal(cls, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, (datetime, date_type)):
            return value.isoformat()
        return str(value)

    @field_validator("taken_by_customer", mode="before")
    @classmethod
    def _coerce_taken(cls, value: Any) -> bool:
        # HTML checkboxes submit "on"
        if isinstance(value, str):
            return value.strip().lower() in {"on", "true", "1", "yes"}
        return bool(value)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], fallback_id: str | None = None) -> Record:
        """Validate a raw store document into a Record.

        Args:
            raw: Document fields, camelCase or snake_case.
            fallback_id: Identifier used when the document carries none.

        Returns:
            The validated record.

        Raises:
            DomainError: If the document cannot be validated.
        """
        data = dict(raw)
        if not data.get("id") and fallback_id is not None:
            data["id"] = fallback_id
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DomainError(
                ErrorCode.INVALID_RECORD,
                f"Invalid record payload: {e.error_count()} validation error(s)",
                ErrorContext(
                    operation="record_from_raw",
                    key=str(data.get("id", "")),
                ),
                original_error=e,
            ) from e

    @classmethod
    def field_name(cls, name: str) -> str:
        """Resolve an alias (``voucherNumber``) to its field name."""
        if name in cls.model_fields:
            return name
        for field_name, info in cls.model_fields.items():
            if info.alias == name:
                return field_name
        return name

    def get_field(self, name: str) -> Any:
        """Return a declared or extra field value, ``None`` when absent."""
        resolved = self.field_name(name)
        if resolved in type(self).model_fields:
            return getattr(self, resolved)
        extra = self.model_extra or {}
        return extra.get(name)

    def with_patch(self, patch: Mapping[str, Any]) -> Record:
        """Return a new record with ``patch`` merged over this one."""
        data = self.model_dump()
        for key, value in patch.items():
            data[self.field_name(key)] = value
        return type(self).model_validate(data)

    def display_values(self) -> dict[str, str]:
        """Field values formatted for display with placeholders filled in."""
        amount = self.amount if self.amount is not None else RecordPlaceholders.AMOUNT
        return {
            "customer_name": self.customer_name or RecordPlaceholders.TEXT,
            "phone_model": self.phone_model or RecordPlaceholders.TEXT,
            "phone_color": self.phone_color or RecordPlaceholders.TEXT,
            "voucher_number": self.voucher_number or RecordPlaceholders.VOUCHER_NUMBER,
            "amount": f"{amount:,.0f} ¥",
            "technician_name": self.technician_name or RecordPlaceholders.TEXT,
            "date": self.date or RecordPlaceholders.DATE,
            "taken": "Taken" if self.taken_by_customer else "Not Taken",
        }


def ingest_records(raw_items: Iterable[Mapping[str, Any] | Record]) -> list[Record]:
    """Validate a raw collection, skipping documents that fail validation.

    A single malformed document must not take the whole list down, so
    failures are logged and the document is dropped.
    """
    records: list[Record] = []
    for position, raw in enumerate(raw_items):
        if isinstance(raw, Record):
            records.append(raw)
            continue
        try:
            records.append(Record.from_raw(raw))
        except DomainError as e:
            log_operation_error(
                logger,
                e,
                operation="ingest_records",
                context={"position": position},
                level=logging.WARNING,
            )
    return records
