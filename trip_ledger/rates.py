"""
Rates Module

This module supplies exchange-rate tables to the trip ledger and caches
them for a limited time.

Features:
    - Fetch latest rates from a Frankfurter-compatible API
    - Per-base-currency cache with a time-to-live (1 hour by default)
    - Stale cache reused when a refresh fails, with a retry back-off
    - Fetches run outside the lock; concurrent readers never queue behind one
    - Empty table returned when nothing was ever fetched

Data Model:
    RateTable: dict of currency code -> units per 1 unit of the base currency.
    The base currency itself is always present with rate 1.0.

Classes:
    RateCache: Caller-owned cache around a rate fetcher.

Functions:
    fetch_frankfurter_rates: Fetch the latest rates for a base currency.
"""

import json
import threading
import time
from typing import Callable, Optional
from urllib.parse import urlencode
from urllib.request import urlopen

import structlog

from trip_ledger.currency import REPORTING_CURRENCY, RateTable

logger = structlog.get_logger(__name__)

DEFAULT_RATES_URL = "https://api.frankfurter.app"
DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_RETRY_SECONDS = 60


def fetch_frankfurter_rates(
    base: str = REPORTING_CURRENCY,
    url: str = DEFAULT_RATES_URL,
    timeout: float = 5.0
) -> RateTable:
    """
    Fetch the latest rates for a base currency.

    Calls GET {url}/latest?from={base}, whose response looks like:
        {"amount": 1.0, "base": "EUR", "date": "...", "rates": {"USD": 1.08, ...}}

    Args:
        base: Base currency code.
        url: API base URL.
        timeout: HTTP timeout in seconds.

    Returns:
        RateTable: The "rates" object of the response.

    Raises:
        OSError: On network/HTTP failure (urllib.error.URLError is a subclass).
        ValueError: If the response is not the expected JSON shape.
    """
    query = urlencode({"from": base})
    with urlopen(f"{url.rstrip('/')}/latest?{query}", timeout=timeout) as response:
        payload = json.loads(response.read().decode("utf-8"))

    rates = payload.get("rates") if isinstance(payload, dict) else None
    if not isinstance(rates, dict):
        raise ValueError(f"Unexpected rates response for base {base}")
    return {code: float(rate) for code, rate in rates.items()}


class RateCache:
    """
    Time-limited cache of rate tables keyed by base currency.

    Owned by the caller and passed to whoever needs rates; the pure
    conversion functions never touch it. Fetches run outside the lock:
    while one thread fetches a base, other readers get the stale table
    (or {}) right away. After a failed fetch, get() waits retry_seconds
    before trying that base again.

    Attributes:
        ttl_seconds (float): How long a fetched table stays fresh.
        retry_seconds (float): Wait after a failed fetch before retrying.
    """

    def __init__(
        self,
        fetcher: Callable[[str], RateTable] = fetch_frankfurter_rates,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        retry_seconds: float = DEFAULT_RETRY_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self._fetcher = fetcher
        self.ttl_seconds = ttl_seconds
        self.retry_seconds = retry_seconds
        self._clock = clock
        self._entries: dict[str, tuple[RateTable, float]] = {}
        self._failed_at: dict[str, float] = {}
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    def is_stale(self, base: str = REPORTING_CURRENCY) -> bool:
        """Check whether the table for a base is missing or older than the TTL."""
        entry = self._entries.get(base)
        if entry is None:
            return True
        _, fetched_at = entry
        return self._clock() - fetched_at >= self.ttl_seconds

    def get(self, base: str = REPORTING_CURRENCY) -> RateTable:
        """
        Get the rate table for a base currency.

        Returns the cached table while fresh; otherwise fetches a new one,
        unless a fetch for the base is already running or the last one
        failed less than retry_seconds ago.

        Returns:
            RateTable: A copy of the table (stale or {} if no fresh one is available).
        """
        with self._lock:
            if not self.is_stale(base):
                return dict(self._entries[base][0])
            if base in self._in_flight or self._backing_off(base):
                return self._cached(base)
            self._in_flight.add(base)
        return self._fetch(base)

    def refresh(self, base: str = REPORTING_CURRENCY) -> RateTable:
        """Fetch a new table for a base currency regardless of its age or past failures."""
        with self._lock:
            if base in self._in_flight:
                return self._cached(base)
            self._in_flight.add(base)
        return self._fetch(base)

    def _backing_off(self, base: str) -> bool:
        failed_at = self._failed_at.get(base)
        return failed_at is not None and self._clock() - failed_at < self.retry_seconds

    def _cached(self, base: str) -> RateTable:
        entry: Optional[tuple] = self._entries.get(base)
        return dict(entry[0]) if entry else {}

    def _fetch(self, base: str) -> RateTable:
        # Caller has marked base as in flight.
        try:
            rates = dict(self._fetcher(base))
        except Exception as e:
            with self._lock:
                self._in_flight.discard(base)
                self._failed_at[base] = self._clock()
                stale = self._cached(base)
            logger.error(
                "exchange_rates_fetch_failed",
                base=base,
                error=str(e),
                using_stale=bool(stale),
                retry_seconds=self.retry_seconds
            )
            return stale

        rates[base] = 1.0
        with self._lock:
            self._in_flight.discard(base)
            self._entries[base] = (rates, self._clock())
            self._failed_at.pop(base, None)
        logger.info("exchange_rates_refreshed", base=base, currencies=len(rates))
        return dict(rates)
