"""Shared exceptions for service modules."""


class ServiceError(Exception):
    """Base exception for service layer errors."""

class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

class StorageServiceError(ServiceError):
    """Raised when object storage cannot issue a signed URL."""
