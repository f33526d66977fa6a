"""Chunked batch execution of per-object operations."""

from __future__ import annotations

import logging
from typing import Any

from qiniu_client.core.config import get_settings
from qiniu_client.core.exceptions import CallerInputError, TransportError
from qiniu_client.http import Transport

from .operations import (
    ChangeMimeTypeOperation,
    ChangeStorageTypeOperation,
    CopyOperation,
    DeleteAfterDaysOperation,
    DeleteOperation,
    DisableOperation,
    EnableOperation,
    MoveOperation,
    Operation,
    RenameOperation,
    StatOperation,
)
from .schemas import BatchResult

logger = logging.getLogger(__name__)

BATCH_PATH = "/batch"


class BatchOperations:
    """A batch session queuing operations until :meth:`execute`.

    Queuing methods return the session itself so calls can be chained::

        results = await bucket.batch().stat("a").delete("b").execute()

    Operations are sent in chunks of at most ``max_batch_size`` per request,
    one chunk at a time and in submission order. The result list always has
    one entry per queued operation: a chunk whose request fails is reported
    as a failure for each of its operations and the following chunks still
    run. Partial failures never raise; inspect each :class:`BatchResult`.
    """

    def __init__(
        self,
        transport: Transport,
        rs_url: str,
        *,
        bucket: str | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        """Initialize a batch session.

        Args:
            transport: Request executor.
            rs_url: Base URL of the object management endpoint.
            bucket: Default bucket for queuing calls without an explicit one.
            max_batch_size: Operations per request, defaults to settings.
        """
        if max_batch_size is None:
            max_batch_size = get_settings().batch_max_size
        if max_batch_size <= 0:
            raise CallerInputError("max_batch_size must be greater than zero")
        self._transport = transport
        self._rs_url = rs_url
        self._bucket = bucket
        self._max_batch_size = max_batch_size
        self._operations: list[Operation] = []

    def __len__(self) -> int:
        return len(self._operations)

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._operations)

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def add(self, operation: Operation) -> BatchOperations:
        """Queue a prebuilt operation."""
        self._operations.append(operation)
        return self

    def stat(self, key: str, *, bucket: str | None = None) -> BatchOperations:
        return self.add(StatOperation(bucket=self._bucket_name(bucket), key=key))

    def delete(self, key: str, *, bucket: str | None = None) -> BatchOperations:
        return self.add(DeleteOperation(bucket=self._bucket_name(bucket), key=key))

    def copy(
        self,
        key: str,
        to_key: str,
        *,
        to_bucket: str | None = None,
        bucket: str | None = None,
        force: bool = False,
    ) -> BatchOperations:
        source = self._bucket_name(bucket)
        return self.add(
            CopyOperation(
                bucket=source,
                key=key,
                to_bucket=to_bucket or source,
                to_key=to_key,
                force=force,
            )
        )

    def move(
        self,
        key: str,
        to_key: str,
        *,
        to_bucket: str | None = None,
        bucket: str | None = None,
        force: bool = False,
    ) -> BatchOperations:
        source = self._bucket_name(bucket)
        return self.add(
            MoveOperation(
                bucket=source,
                key=key,
                to_bucket=to_bucket or source,
                to_key=to_key,
                force=force,
            )
        )

    def rename(
        self,
        key: str,
        to_key: str,
        *,
        bucket: str | None = None,
        force: bool = False,
    ) -> BatchOperations:
        return self.add(
            RenameOperation(bucket=self._bucket_name(bucket), key=key, to_key=to_key, force=force)
        )

    def change_storage_type(
        self,
        key: str,
        storage_type: int,
        *,
        bucket: str | None = None,
    ) -> BatchOperations:
        return self.add(
            ChangeStorageTypeOperation(
                bucket=self._bucket_name(bucket),
                key=key,
                storage_type=storage_type,
            )
        )

    def change_mime_type(self, key: str, mime_type: str, *, bucket: str | None = None) -> BatchOperations:
        return self.add(
            ChangeMimeTypeOperation(bucket=self._bucket_name(bucket), key=key, mime_type=mime_type)
        )

    def disable(self, key: str, *, bucket: str | None = None) -> BatchOperations:
        return self.add(DisableOperation(bucket=self._bucket_name(bucket), key=key))

    def enable(self, key: str, *, bucket: str | None = None) -> BatchOperations:
        return self.add(EnableOperation(bucket=self._bucket_name(bucket), key=key))

    def delete_after_days(self, key: str, days: int, *, bucket: str | None = None) -> BatchOperations:
        return self.add(DeleteAfterDaysOperation(bucket=self._bucket_name(bucket), key=key, days=days))

    async def execute(self) -> list[BatchResult]:
        """Send every queued operation and return one result per operation.

        The queue is drained, so a second call only sends operations queued
        after the first one.
        """
        operations, self._operations = self._operations, []
        results: list[BatchResult] = []

        for start in range(0, len(operations), self._max_batch_size):
            chunk = operations[start : start + self._max_batch_size]
            results.extend(await self._execute_chunk(start, chunk))

        failed = sum(1 for result in results if not result.success)
        if operations:
            logger.info(
                f"Batch executed {len(operations)} operations "
                f"in {-(-len(operations) // self._max_batch_size)} requests ({failed} failed)"
            )
        return results

    do = execute

    async def _execute_chunk(self, offset: int, chunk: list[Operation]) -> list[BatchResult]:
        commands = [operation.command for operation in chunk]
        try:
            response = await self._transport.request(
                "POST",
                self._rs_url,
                BATCH_PATH,
                data={"op": commands},
            )
        except TransportError as e:
            logger.warning(
                f"Batch chunk at offset {offset} ({len(chunk)} operations) failed: {e}"
            )
            return self._failed_chunk(offset, chunk, e.status_code, str(e))

        outcomes = response.body
        if not isinstance(outcomes, list) or len(outcomes) != len(chunk):
            logger.warning(f"Batch chunk at offset {offset} returned an unexpected reply")
            return self._failed_chunk(
                offset,
                chunk,
                response.status_code,
                "Unexpected batch reply: outcome count does not match operations",
            )

        return [
            self._to_result(offset + index, operation, outcome)
            for index, (operation, outcome) in enumerate(zip(chunk, outcomes, strict=True))
        ]

    @staticmethod
    def _to_result(index: int, operation: Operation, outcome: Any) -> BatchResult:
        outcome = outcome if isinstance(outcome, dict) else {}
        code = outcome.get("code")
        data = outcome.get("data")
        data = data if isinstance(data, dict) else None
        success = code == 200
        error = None
        if not success:
            error = (data or {}).get("error") or f"Operation failed with code {code}"
        return BatchResult(
            operation_index=index,
            operation=operation,
            success=success,
            status_code=code,
            response=data,
            error=error,
        )

    @staticmethod
    def _failed_chunk(
        offset: int,
        chunk: list[Operation],
        status_code: int | None,
        error: str,
    ) -> list[BatchResult]:
        return [
            BatchResult(
                operation_index=offset + index,
                operation=operation,
                success=False,
                status_code=status_code,
                error=error,
            )
            for index, operation in enumerate(chunk)
        ]

    def _bucket_name(self, bucket: str | None) -> str:
        name = bucket or self._bucket
        if not name:
            raise CallerInputError("bucket is required when the batch has no default bucket")
        return name
