"""Exceptions raised while processing meter reading uploads."""


class MeterReadingUploadError(Exception):
    """Base exception for upload processing errors."""


class BatchCommitError(MeterReadingUploadError):
    """Raised when the staged accounts cannot be committed."""


class UploadCanceledError(MeterReadingUploadError):
    """Raised when an upload is canceled before it is committed."""
