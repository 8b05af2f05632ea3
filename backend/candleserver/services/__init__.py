"""
Candle Server Services

Service layer containing the indicator engine and the feed adapter.
Each service has a defined interface (contract) and implementation.
"""

from candleserver.services.base import BaseService, ServiceError, ValidationError

__all__ = ["BaseService", "ServiceError", "ValidationError"]
