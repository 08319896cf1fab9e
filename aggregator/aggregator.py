import concurrent.futures
import logging
import time
from typing import Dict, Iterable, List

from providers.base.provider import Provider, ProviderOutcome, ValidationResponse
from providers.client import ProviderClient
from providers.config import DEFAULT_MAX_WORKERS, DEFAULT_PROVIDER_TIMEOUT

logger = logging.getLogger(__name__)


class Aggregator:
    """
    Fans a validity check out to every selected provider and joins on the results.

    Each provider gets its own worker thread. The aggregator waits at most
    ``timeout`` seconds from dispatch; providers that have not answered by then
    are reported as timed out and their calls are abandoned.
    """

    def __init__(
        self,
        client: ProviderClient,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.client = client
        self.timeout = timeout
        self.max_workers = max_workers

    def aggregate(self, account_number: str, providers: Iterable[Provider]) -> ValidationResponse:
        """
        Check ``account_number`` against all ``providers`` concurrently.

        Returns:
            Exactly one outcome per provider, in completion order. Providers
            that fail or time out yield ``isValid=False``.
        """
        providers_to_call = list(providers)
        if not providers_to_call:
            logger.info("Aggregator: no providers selected")
            return ValidationResponse(results=[])

        logger.info(f"Aggregator: checking account against {len(providers_to_call)} providers")
        start_time = time.time()

        outcomes: Dict[concurrent.futures.Future, ProviderOutcome] = {}
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(providers_to_call)),
            thread_name_prefix="provider-check",
        )
        try:
            future_to_provider = {
                executor.submit(self.client.check, account_number, provider): provider
                for provider in providers_to_call
            }

            try:
                for future in concurrent.futures.as_completed(
                    future_to_provider, timeout=self.timeout
                ):
                    outcomes[future] = self._resolve(future, future_to_provider[future])
            except concurrent.futures.TimeoutError:
                pending = [p.name for f, p in future_to_provider.items() if f not in outcomes]
                logger.warning(f"Providers {pending} did not answer within {self.timeout}s")
        finally:
            # Never block on calls that outlived the deadline.
            executor.shutdown(wait=False, cancel_futures=True)

        results: List[ProviderOutcome] = list(outcomes.values())
        for future, provider in future_to_provider.items():
            if future not in outcomes:
                results.append(
                    ProviderOutcome.timed_out(
                        provider.name, f"No response within {self.timeout}s"
                    )
                )

        response = ValidationResponse(results=results)
        execution_time = time.time() - start_time
        logger.info(
            f"Aggregator: {len(response)} results, {response.valid_count} valid, "
            f"{response.failed_count} failed in {execution_time:.3f}s"
        )
        return response

    @staticmethod
    def _resolve(future: concurrent.futures.Future, provider: Provider) -> ProviderOutcome:
        try:
            return future.result()
        except Exception as exc:
            logger.exception(f"Provider {provider.name} generated an exception: {exc}")
            return ProviderOutcome.errored(provider.name, f"Exception: {str(exc)}")
