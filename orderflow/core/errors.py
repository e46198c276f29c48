"""Exception hierarchy for import, storage, and external service failures."""
from __future__ import annotations


class OrderflowError(Exception):
    """Base class for every error raised by the orderflow package."""


class ResolutionError(OrderflowError):
    """A storage lookup or write could not be completed."""


class ExternalServiceError(OrderflowError):
    """The text-understanding service failed or returned unusable output."""


class SourceFormatError(OrderflowError, ValueError):
    """An input file could not be read as import rows or text."""


class ImportBatchError(OrderflowError):
    """A batch import aborted; nothing from the batch was persisted."""

    def __init__(self, batch: str, row_index: int, cause: BaseException) -> None:
        self.batch = batch
        self.row_index = row_index
        self.cause = cause
        super().__init__(f'Batch "{batch}" failed at row {row_index}: {cause}')
