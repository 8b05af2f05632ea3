"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod


class BaseService(ABC):
    """
    Base class for all services.

    Each service:
    - Has a name used in logs and errors
    - Runs synchronously to completion (no internal I/O)
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Input validation error."""
    pass
