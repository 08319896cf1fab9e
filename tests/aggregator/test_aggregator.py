"""
Tests for the concurrent provider fan-out.

Provider calls are replaced by fake clients, or by a real ProviderClient on a
mocked session, so the tests never leave the process.
"""
import threading
import time
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import requests

from aggregator.aggregator import Aggregator
from providers.base.provider import OutcomeStatus, Provider, ProviderOutcome
from providers.client import ProviderClient

ACCOUNT_NUMBER = "12345678"


def make_providers(count):
    return [
        Provider(name=f"provider{i}", url=f"https://provider{i}.test/validate")
        for i in range(1, count + 1)
    ]


class FakeClient:
    """Answers from a verdict table, optionally after a delay per provider."""

    def __init__(self, verdicts=None, delays=None):
        self.verdicts = verdicts or {}
        self.delays = delays or {}
        self.calls = []
        self._lock = threading.Lock()

    def check(self, account_number, provider):
        with self._lock:
            self.calls.append((account_number, provider.name))
        delay = self.delays.get(provider.name)
        if delay:
            time.sleep(delay)
        return ProviderOutcome.responded(provider.name, self.verdicts.get(provider.name, True))


class HangingClient:
    """Never answers for the providers in ``hanging`` until released."""

    def __init__(self, hanging):
        self.hanging = set(hanging)
        self.release = threading.Event()

    def check(self, account_number, provider):
        if provider.name in self.hanging:
            self.release.wait(10)
        return ProviderOutcome.responded(provider.name, True)


class BrokenClient:
    def check(self, account_number, provider):
        raise RuntimeError("client bug")


class TestAggregator(unittest.TestCase):

    def test_one_outcome_per_provider(self):
        for count in (1, 2, 5, 12):
            with self.subTest(count=count):
                providers = make_providers(count)
                aggregator = Aggregator(FakeClient(), timeout=1.0)

                response = aggregator.aggregate(ACCOUNT_NUMBER, providers)

                self.assertEqual(len(response.results), count)
                self.assertEqual(
                    set(response.by_provider()), {provider.name for provider in providers}
                )

    def test_every_provider_receives_the_account_number(self):
        client = FakeClient()
        Aggregator(client, timeout=1.0).aggregate(ACCOUNT_NUMBER, make_providers(3))

        self.assertEqual(
            sorted(client.calls),
            [(ACCOUNT_NUMBER, "provider1"), (ACCOUNT_NUMBER, "provider2"), (ACCOUNT_NUMBER, "provider3")],
        )

    def test_verdicts_are_passed_through(self):
        client = FakeClient(verdicts={"provider1": True, "provider2": False})

        response = Aggregator(client, timeout=1.0).aggregate(ACCOUNT_NUMBER, make_providers(2))

        outcomes = response.by_provider()
        self.assertTrue(outcomes["provider1"].is_valid)
        self.assertFalse(outcomes["provider2"].is_valid)
        self.assertEqual(response.valid_count, 1)
        self.assertEqual(response.failed_count, 0)

    def test_no_providers_returns_immediately_without_threads(self):
        with patch("aggregator.aggregator.concurrent.futures.ThreadPoolExecutor") as executor:
            start = time.monotonic()
            response = Aggregator(FakeClient(), timeout=1.0).aggregate(ACCOUNT_NUMBER, [])
            elapsed = time.monotonic() - start

        self.assertEqual(response.results, [])
        self.assertEqual(response.to_dict(), {"results": []})
        executor.assert_not_called()
        self.assertLess(elapsed, 0.1)

    def test_calls_run_in_parallel(self):
        providers = make_providers(5)
        client = FakeClient(delays={provider.name: 0.3 for provider in providers})

        start = time.monotonic()
        response = Aggregator(client, timeout=2.0).aggregate(ACCOUNT_NUMBER, providers)
        elapsed = time.monotonic() - start

        self.assertEqual(len(response.results), 5)
        self.assertTrue(all(outcome.is_valid for outcome in response.results))
        # Five sequential calls would take 1.5s.
        self.assertLess(elapsed, 1.2)

    def test_hanging_provider_times_out_without_blocking(self):
        client = HangingClient(hanging={"provider2"})
        self.addCleanup(client.release.set)

        start = time.monotonic()
        response = Aggregator(client, timeout=0.3).aggregate(ACCOUNT_NUMBER, make_providers(3))
        elapsed = time.monotonic() - start

        self.assertLess(elapsed, 1.5)
        outcomes = response.by_provider()
        self.assertEqual(len(outcomes), 3)
        self.assertTrue(outcomes["provider1"].is_valid)
        self.assertTrue(outcomes["provider3"].is_valid)
        self.assertFalse(outcomes["provider2"].is_valid)
        self.assertEqual(outcomes["provider2"].status, OutcomeStatus.TIMED_OUT)

    def test_all_providers_hanging(self):
        client = HangingClient(hanging={"provider1", "provider2"})
        self.addCleanup(client.release.set)

        start = time.monotonic()
        response = Aggregator(client, timeout=0.2).aggregate(ACCOUNT_NUMBER, make_providers(2))
        elapsed = time.monotonic() - start

        self.assertLess(elapsed, 1.5)
        self.assertEqual(len(response.results), 2)
        self.assertTrue(all(o.status == OutcomeStatus.TIMED_OUT for o in response.results))
        self.assertEqual(response.to_dict()["results"][0]["isValid"], False)

    def test_unexpected_client_exception_is_absorbed(self):
        with self.assertLogs("aggregator.aggregator", level="ERROR"):
            response = Aggregator(BrokenClient(), timeout=1.0).aggregate(
                ACCOUNT_NUMBER, make_providers(2)
            )

        self.assertEqual(len(response.results), 2)
        for outcome in response.results:
            self.assertFalse(outcome.is_valid)
            self.assertEqual(outcome.status, OutcomeStatus.ERRORED)
            self.assertIn("client bug", outcome.error)

    def test_worker_count_is_capped(self):
        with patch(
            "aggregator.aggregator.concurrent.futures.ThreadPoolExecutor",
            wraps=ThreadPoolExecutor,
        ) as executor:
            Aggregator(FakeClient(), timeout=1.0, max_workers=3).aggregate(
                ACCOUNT_NUMBER, make_providers(6)
            )
            Aggregator(FakeClient(), timeout=1.0, max_workers=3).aggregate(
                ACCOUNT_NUMBER, make_providers(2)
            )

        self.assertEqual(executor.call_args_list[0].kwargs["max_workers"], 3)
        self.assertEqual(executor.call_args_list[1].kwargs["max_workers"], 2)

    def test_thread_exhaustion_propagates(self):
        client = FakeClient()
        with patch("aggregator.aggregator.concurrent.futures.ThreadPoolExecutor") as executor:
            executor.return_value.submit.side_effect = RuntimeError("can't start new thread")
            with self.assertRaises(RuntimeError):
                Aggregator(client, timeout=1.0).aggregate(ACCOUNT_NUMBER, make_providers(2))

        executor.return_value.shutdown.assert_called_once_with(wait=False, cancel_futures=True)


class TestAggregatorWithProviderClient(unittest.TestCase):
    """End to end through the real client with a mocked HTTP session."""

    def setUp(self):
        self.session = MagicMock()
        self.session.headers = {}
        self.client = ProviderClient(timeout=1.0, session=self.session)
        self.aggregator = Aggregator(self.client, timeout=1.0)

    def test_both_providers_refuse_connections(self):
        self.session.post.side_effect = requests.ConnectionError("Connection refused")

        response = self.aggregator.aggregate(ACCOUNT_NUMBER, make_providers(2))

        self.assertCountEqual(
            response.to_dict()["results"],
            [
                {"provider": "provider1", "isValid": False},
                {"provider": "provider2", "isValid": False},
            ],
        )

    def test_single_provider_says_valid(self):
        answer = MagicMock(status_code=200)
        answer.json.return_value = {"isValid": True}
        self.session.post.return_value = answer

        response = self.aggregator.aggregate(ACCOUNT_NUMBER, make_providers(1))

        self.assertEqual(response.to_dict(), {"results": [{"provider": "provider1", "isValid": True}]})

    def test_partial_failure_keeps_every_provider(self):
        ok = MagicMock(status_code=200)
        ok.json.return_value = {"isValid": True}

        def post(url, json, timeout):
            if "provider2" in url:
                raise requests.ConnectionError("down")
            return ok

        self.session.post.side_effect = post

        response = self.aggregator.aggregate(ACCOUNT_NUMBER, make_providers(3))

        outcomes = response.by_provider()
        self.assertEqual(len(outcomes), 3)
        self.assertTrue(outcomes["provider1"].is_valid)
        self.assertFalse(outcomes["provider2"].is_valid)
        self.assertTrue(outcomes["provider3"].is_valid)
