"""
HTTP client for bank account data providers.

Every provider speaks the same protocol: a JSON POST of
``{"accountNumber": "..."}`` answered by ``{"isValid": true|false}``.

``ProviderClient.check`` never raises. Connection problems, timeouts,
non-success statuses and unusable bodies are turned into a negative
``ProviderOutcome`` and logged.
"""
import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from .base.provider import Provider, ProviderOutcome
from .config import DEFAULT_MAX_WORKERS, DEFAULT_PROVIDER_TIMEOUT
from .exceptions import (
    ProviderConnectionError,
    ProviderError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)


class ProviderClient:
    """Performs one bounded-time validity check against a provider."""

    DEFAULT_HEADERS = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    def __init__(
        self,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        session: Optional[requests.Session] = None,
        pool_size: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Initialize the client.

        Args:
            timeout: Per-call timeout in seconds
            session: Optional preconfigured requests session, used as is
            pool_size: Connections kept per provider host when the client
                builds its own session
        """
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update(self.DEFAULT_HEADERS)

            # One pooled connection per concurrent call to the same host
            adapter = HTTPAdapter(pool_maxsize=pool_size)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._session = session

    def check(self, account_number: str, provider: Provider) -> ProviderOutcome:
        """
        Ask a single provider whether ``account_number`` is valid.

        Returns:
            The provider's verdict, or a negative outcome if the call failed
        """
        try:
            is_valid = self._request_verdict(account_number, provider)
        except ProviderTimeoutError as e:
            logger.warning(f"Provider {provider.name} timed out: {e}")
            return ProviderOutcome.timed_out(provider.name, str(e))
        except ProviderError as e:
            if e.details:
                logger.warning(f"Provider {provider.name} failed: {e} {e.details}")
            else:
                logger.warning(f"Provider {provider.name} failed: {e}")
            return ProviderOutcome.errored(provider.name, str(e))

        logger.debug(f"Provider {provider.name} answered isValid={is_valid}")
        return ProviderOutcome.responded(provider.name, is_valid)

    def _request_verdict(self, account_number: str, provider: Provider) -> bool:
        payload = {"accountNumber": account_number}

        try:
            response = self._session.post(provider.url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderTimeoutError(
                f"No response within {self.timeout}s", provider=provider.name
            ) from e
        except requests.RequestException as e:
            raise ProviderConnectionError(
                f"Connection error: {str(e)}", provider=provider.name
            ) from e

        if not 200 <= response.status_code < 300:
            raise ProviderResponseError(
                f"HTTP {response.status_code}",
                provider=provider.name,
                details={"body": response.text[:100] if response.text else ""},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(
                "Invalid JSON in response",
                provider=provider.name,
                details={"body": response.text[:100] if response.text else ""},
            ) from e

        return self._parse_verdict(data, provider)

    @staticmethod
    def _parse_verdict(data: Any, provider: Provider) -> bool:
        if not isinstance(data, dict):
            raise ProviderResponseError(
                f"Expected a JSON object, got {type(data).__name__}", provider=provider.name
            )

        is_valid = data.get("isValid")
        if not isinstance(is_valid, bool):
            raise ProviderResponseError(
                "Response has no boolean 'isValid'",
                provider=provider.name,
                details={"keys": sorted(data.keys())},
            )
        return is_valid

    def close(self):
        """Close the session and clean up resources."""
        if self._session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def describe_outcome(outcome: ProviderOutcome) -> Dict[str, Any]:
    """Outcome with its diagnostic fields, for logs and the management command."""
    return {
        "provider": outcome.provider_name,
        "isValid": outcome.is_valid,
        "status": outcome.status.value,
        "error": outcome.error,
    }
