"""Custom exception classes for the file store server."""


class FileHostError(Exception):
    """
    Base exception class for all file store errors.
    """
    pass


class InvalidRequestError(FileHostError):
    """
    Raised when request input is missing or malformed.
    """
    pass


class MissingFileError(InvalidRequestError):
    """
    Raised when an upload carries no file part.
    """
    pass


class InvalidNameError(InvalidRequestError):
    """
    Raised when an uploaded file part has no usable name.
    """
    pass


class StoredFileNotFoundError(FileHostError):
    """
    Raised when a requested file does not exist in the store directory.
    """
    pass


class FileConflictError(FileHostError):
    """
    Raised when a rename target is already taken by another file.
    """
    pass


class PayloadTooLargeError(FileHostError):
    """
    Raised when a request body exceeds the configured ceiling.
    """
    pass


class StoreWriteFailedError(FileHostError):
    """
    Raised when writing, renaming or removing a file fails on disk.
    """
    pass


class StoreReadFailedError(FileHostError):
    """
    Raised when reading or listing the store directory fails.
    """
    pass
