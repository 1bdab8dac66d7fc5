"""Remote collection sources.

Reference implementations of the ``RemoteCollectionSource`` and
``RecordMutationApi`` protocols. The real document store sits behind the
same interface; these two cover local runs and tests:

- ``InMemoryCollectionSource``: collections held in dicts, with optional
  simulated latency.
- ``JsonFileCollectionSource``: read-only collections backed by JSON files,
  one file per collection.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from voucherview.shared.errors import (
    ErrorCode,
    ErrorContext,
    RemoteSourceError,
    create_remote_error,
)
from voucherview.shared.protocols import RawDocument

logger = logging.getLogger(__name__)


def matches_predicate(document: Mapping[str, Any], predicate: Mapping[str, Any]) -> bool:
    """Equality match of every predicate field against the document."""
    return all(document.get(field) == value for field, value in predicate.items())


class InMemoryCollectionSource:
    """Dict-backed document store.

    Args:
        collections: Initial documents per collection id. Documents without
            an ``id`` get a generated one.
        latency: Seconds each call sleeps before answering.
    """

    def __init__(
        self,
        collections: Mapping[str, list[Mapping[str, Any]]] | None = None,
        latency: float = 0.0,
    ) -> None:
        self.latency = latency
        self.fetch_count = 0
        self._collections: dict[str, list[RawDocument]] = {}
        for collection_id, documents in (collections or {}).items():
            self._collections[collection_id] = [self._with_id(doc) for doc in documents]

    @staticmethod
    def _with_id(document: Mapping[str, Any]) -> RawDocument:
        data = dict(document)
        data.setdefault("id", uuid.uuid4().hex)
        return data

    async def _delay(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    async def fetch_all(self, collection_id: str) -> list[RawDocument]:
        await self._delay()
        self.fetch_count += 1
        return copy.deepcopy(self._collections.get(collection_id, []))

    async def fetch_filtered(
        self,
        collection_id: str,
        predicate: Mapping[str, Any],
    ) -> list[RawDocument]:
        await self._delay()
        self.fetch_count += 1
        return [
            copy.deepcopy(doc)
            for doc in self._collections.get(collection_id, [])
            if matches_predicate(doc, predicate)
        ]

    async def create_record(self, collection_id: str, data: Mapping[str, Any]) -> str:
        await self._delay()
        document = self._with_id(data)
        self._collections.setdefault(collection_id, []).append(document)
        logger.debug("Created document %s in %s", document["id"], collection_id)
        return str(document["id"])

    async def update_record(
        self,
        collection_id: str,
        record_id: str,
        patch: Mapping[str, Any],
    ) -> None:
        await self._delay()
        document = self._find(collection_id, record_id)
        document.update(patch)
        document["id"] = record_id

    async def delete_record(self, collection_id: str, record_id: str) -> None:
        await self._delay()
        document = self._find(collection_id, record_id)
        self._collections[collection_id].remove(document)

    def _find(self, collection_id: str, record_id: str) -> RawDocument:
        for document in self._collections.get(collection_id, []):
            if str(document.get("id")) == record_id:
                return document
        raise RemoteSourceError(
            ErrorCode.RECORD_NOT_FOUND,
            f"Document '{record_id}' not found in '{collection_id}'",
            ErrorContext(operation="find_document", key=collection_id),
        )


class JsonFileCollectionSource:
    """Read-only source mapping each collection id to a JSON array file.

    Args:
        files: Collection id to file path.
    """

    def __init__(self, files: Mapping[str, Path | str]) -> None:
        self.files = {collection_id: Path(path) for collection_id, path in files.items()}

    def _read(self, collection_id: str) -> list[RawDocument]:
        path = self.files.get(collection_id)
        if path is None:
            raise RemoteSourceError(
                ErrorCode.REMOTE_FETCH_FAILED,
                f"Unknown collection '{collection_id}'",
                ErrorContext(operation="fetch_all", key=collection_id),
            )
        try:
            documents = orjson.loads(path.read_bytes())
        except OSError as e:
            raise create_remote_error(
                f"Failed to read collection file {path}: {e!s}",
                collection_id=collection_id,
                operation="fetch_all",
                original_error=e,
            ) from e
        except orjson.JSONDecodeError as e:
            raise create_remote_error(
                f"Collection file {path} is not valid JSON",
                collection_id=collection_id,
                operation="fetch_all",
                original_error=e,
            ) from e

        if not isinstance(documents, list):
            raise create_remote_error(
                f"Collection file {path} must contain a JSON array",
                collection_id=collection_id,
                operation="fetch_all",
            )
        return [doc for doc in documents if isinstance(doc, dict)]

    async def fetch_all(self, collection_id: str) -> list[RawDocument]:
        return await asyncio.to_thread(self._read, collection_id)

    async def fetch_filtered(
        self,
        collection_id: str,
        predicate: Mapping[str, Any],
    ) -> list[RawDocument]:
        documents = await self.fetch_all(collection_id)
        return [doc for doc in documents if matches_predicate(doc, predicate)]
