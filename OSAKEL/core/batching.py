# file: OSAKEL/core/batching.py
"""
Batched Firestore writes and deletes.

Every bulk tool goes through the same loop: accumulate operations into a
write batch, commit when the batch is full, start a new one, and commit the
remainder at the end. Commits are sequential; a failing commit aborts the
whole run and nothing is retried.
"""

import time
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Tuple

from OSAKEL.core.config import (
    BATCH_PAUSE_SECONDS,
    DELETE_PAGE_SIZE,
    FIRESTORE_BATCH_LIMIT,
    MIGRATION_BATCH_SIZE,
)

logger = logging.getLogger("core.batching")
logger.setLevel(logging.INFO)


class BatchCommitError(RuntimeError):
    """A batch commit failed; earlier batches stay committed."""

    def __init__(self, batch_number: int, committed: int, cause: Exception):
        self.batch_number = batch_number
        self.committed = committed
        super().__init__(
            f"Batch {batch_number} failed after {committed} documents were committed: {cause}"
        )


def check_batch_size(size: int) -> int:
    if not isinstance(size, int) or isinstance(size, bool):
        raise ValueError(f"Batch size must be an integer, got {size!r}")
    if size < 1 or size > FIRESTORE_BATCH_LIMIT:
        raise ValueError(f"Batch size must be between 1 and {FIRESTORE_BATCH_LIMIT}, got {size}")
    return size


@dataclass
class BatchResult:
    written: int = 0
    batches: int = 0
    batch_sizes: List[int] = field(default_factory=list)

    def record(self, size: int) -> None:
        self.batches += 1
        self.written += size
        self.batch_sizes.append(size)


# ==============================
# Writer
# ==============================
class BatchedWriter:
    """
    Collects set/update/delete operations and commits them in groups of
    ``batch_size``. As a context manager the remainder is committed on a
    clean exit only.
    """

    def __init__(
        self,
        db,
        batch_size: int = MIGRATION_BATCH_SIZE,
        pause_seconds: float = 0.0,
        sleep: Callable[[float], Any] = time.sleep,
        label: str = "write",
    ):
        self.db = db
        self.batch_size = check_batch_size(batch_size)
        self.pause_seconds = pause_seconds
        self.sleep = sleep
        self.label = label
        self.result = BatchResult()
        self._batch = db.batch()
        self._pending = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.flush()
        return False

    @property
    def pending(self) -> int:
        return self._pending

    def set(self, ref, data: dict, merge: bool = False) -> None:
        if merge:
            self._batch.set(ref, data, merge=True)
        else:
            self._batch.set(ref, data)
        self._added()

    def update(self, ref, data: dict) -> None:
        self._batch.update(ref, data)
        self._added()

    def delete(self, ref) -> None:
        self._batch.delete(ref)
        self._added()

    def flush(self) -> BatchResult:
        if self._pending:
            self._commit()
        return self.result

    def _added(self) -> None:
        self._pending += 1
        if self._pending >= self.batch_size:
            self._commit()

    def _commit(self) -> None:
        number = self.result.batches + 1
        size = self._pending
        logger.info("📦 Committing %s batch %d (%d documents)...", self.label, number, size)
        try:
            self._batch.commit()
        except Exception as e:
            logger.error("❌ %s batch %d failed: %s", self.label, number, e)
            raise BatchCommitError(number, self.result.written, e) from e

        self.result.record(size)
        logger.info("   ✅ %d committed (total: %d)", size, self.result.written)
        self._batch = self.db.batch()
        self._pending = 0
        if self.pause_seconds:
            self.sleep(self.pause_seconds)


def write_in_batches(
    db,
    items: Iterable,
    transform: Callable[[Any], Optional[Tuple[Any, dict]]],
    batch_size: int = MIGRATION_BATCH_SIZE,
    pause_seconds: float = 0.0,
    sleep: Callable[[float], Any] = time.sleep,
    label: str = "write",
) -> BatchResult:
    """
    Read -> transform -> batched ``set``.
    ``transform`` returns ``(document_ref, data)`` or ``None`` to skip an item.
    """
    with BatchedWriter(db, batch_size, pause_seconds, sleep, label) as writer:
        for item in items:
            target = transform(item)
            if target is None:
                continue
            ref, data = target
            writer.set(ref, data)
    return writer.result


# ==============================
# Drain
# ==============================
def drain_collection(
    db,
    collection: str,
    page_size: int = DELETE_PAGE_SIZE,
    pause_seconds: float = BATCH_PAUSE_SECONDS,
    sleep: Callable[[float], Any] = time.sleep,
) -> BatchResult:
    """
    Delete every document in ``collection``: fetch a page, delete it as one
    batch, repeat until a fetch comes back empty.
    """
    check_batch_size(page_size)
    result = BatchResult()

    while True:
        docs = list(db.collection(collection).limit(page_size).stream())
        if not docs:
            logger.info("✅ %s is empty", collection)
            break

        number = result.batches + 1
        logger.info("🗑️  Deleting batch %d from %s (%d documents)...", number, collection, len(docs))
        batch = db.batch()
        for doc in docs:
            batch.delete(doc.reference)
        try:
            batch.commit()
        except Exception as e:
            logger.error("❌ Delete batch %d failed: %s", number, e)
            raise BatchCommitError(number, result.written, e) from e

        result.record(len(docs))
        logger.info("   ✅ %d deleted (total: %d)", len(docs), result.written)
        if pause_seconds:
            sleep(pause_seconds)

    return result
