"""Error classes raised by the reconciliation core.

Contract violations signal a caller (or store) breaking an invariant and are
not meant to be recovered from. Store and storage faults are propagated as
their own types so callers can tell "Anki is unreachable" apart from "the local
reference database failed".
"""

from __future__ import annotations


class ContractViolationError(Exception):
    """Base class for fatal precondition violations."""


class MisalignedBatchError(ContractViolationError, ValueError):
    """Raised when parallel field and tag sequences differ in length."""

    def __init__(self, *, fields: int, tags: int) -> None:
        self.fields = fields
        self.tags = tags
        super().__init__(f"Field and tag batches are misaligned: fields={fields}, tags={tags}")


class DuplicateIndexOutOfRangeError(ContractViolationError, IndexError):
    """Raised when the store reports a duplicate outside the submitted batch."""

    def __init__(self, *, index: int, batch_size: int) -> None:
        self.index = index
        self.batch_size = batch_size
        super().__init__(
            f"Duplicate index {index} is outside the submitted batch of {batch_size} notes"
        )


class InvalidNoteError(ContractViolationError, ValueError):
    """Raised when note or model inputs are inconsistent with each other."""


class ContentStoreError(RuntimeError):
    """Raised when the external content store cannot be reached or fails a call."""


class ReferenceStorageError(RuntimeError):
    """Raised when the local reference cache storage fails."""
