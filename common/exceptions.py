"""Custom exception classes for the upload client."""

from typing import Optional


class UploadError(Exception):
    """
    Base exception class for all upload-related errors.
    """
    pass


class PlanningError(UploadError):
    """
    Raised when a file cannot be partitioned (missing file, unusable name).
    """
    pass


class PrecheckError(UploadError):
    """
    Raised when the existence check fails for a reason other than not-found.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SessionCreateError(UploadError):
    """
    Raised when the server refuses or fails to create the upload directory.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransferError(UploadError):
    """
    Raised when a single part transmission fails at the network or service layer.
    """

    def __init__(self, part_number: int, message: str, status_code: Optional[int] = None):
        super().__init__(f"Part {part_number}: {message}")
        self.part_number = part_number
        self.status_code = status_code
