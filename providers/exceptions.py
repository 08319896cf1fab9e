"""Provider-specific exceptions module."""
from typing import Any, Dict, Optional


class ProviderError(Exception):
    """Base class for all provider-related errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.provider = provider
        self.details = details or {}
        super().__init__(message)


class ProviderConnectionError(ProviderError):
    """Raised when the provider endpoint cannot be reached."""

    pass


class ProviderTimeoutError(ProviderError):
    """Raised when the provider does not answer within the call timeout."""

    pass


class ProviderResponseError(ProviderError):
    """Raised on a non-success status or a body without a boolean verdict."""

    pass
