"""
Base types shared by the bank account data providers.

A provider is a third-party service that can assert whether an account number
appears valid. Providers are pure configuration (a name and an endpoint), so
they are modelled as immutable records rather than one class per provider.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Provider:
    """A configured data provider. Identity is ``name``."""

    name: str
    url: str

    def __str__(self) -> str:
        return f"{self.name} ({self.url})"


class OutcomeStatus(str, enum.Enum):
    """How a single provider check resolved."""

    RESPONDED = "responded"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


@dataclass(frozen=True)
class ProviderOutcome:
    """
    The verdict of one provider for one account number.

    Only a ``RESPONDED`` outcome carries the provider's own verdict; timed out
    and errored outcomes are always negative, with ``error`` describing what
    went wrong.
    """

    provider_name: str
    is_valid: bool
    status: OutcomeStatus = OutcomeStatus.RESPONDED
    error: Optional[str] = None

    @classmethod
    def responded(cls, provider_name: str, is_valid: bool) -> "ProviderOutcome":
        return cls(provider_name=provider_name, is_valid=is_valid)

    @classmethod
    def timed_out(cls, provider_name: str, error: Optional[str] = None) -> "ProviderOutcome":
        return cls(
            provider_name=provider_name,
            is_valid=False,
            status=OutcomeStatus.TIMED_OUT,
            error=error or "Timed out",
        )

    @classmethod
    def errored(cls, provider_name: str, error: str) -> "ProviderOutcome":
        return cls(
            provider_name=provider_name,
            is_valid=False,
            status=OutcomeStatus.ERRORED,
            error=error,
        )

    @property
    def failed(self) -> bool:
        return self.status is not OutcomeStatus.RESPONDED

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape of a single result."""
        return {"provider": self.provider_name, "isValid": self.is_valid}


@dataclass(frozen=True)
class ValidationResponse:
    """One outcome per provider selected for the request, in no particular order."""

    results: List[ProviderOutcome] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def by_provider(self) -> Dict[str, ProviderOutcome]:
        return {outcome.provider_name: outcome for outcome in self.results}

    @property
    def valid_count(self) -> int:
        return sum(1 for outcome in self.results if outcome.is_valid)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.results if outcome.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {"results": [outcome.to_dict() for outcome in self.results]}
