from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional, TYPE_CHECKING

from budgetfx.core.clock import Clock, utc_now
from budgetfx.core.errors import RateProviderError
from budgetfx.models.constants import PIVOT_CURRENCY, Currency, parse_currency
from budgetfx.models.rates import RateEntry
from .base import RateProvider
from .providers import make_rate_provider
from .table import fallback_rates

if TYPE_CHECKING:  # pragma: no cover
    from budgetfx.core.config import Settings

"""USD pivoted rate cache.

Design:
    - One batch of USD->X entries sharing a single `last_fetch` stamp; the whole
      batch is replaced on every refresh.
    - Stale after `ttl` (default 1 hour); the next lookup refreshes first.
    - Upstream failure never surfaces: the batch is rebuilt from the fallback
      table and `last_fetch` still advances, so a down upstream is retried at
      most once per TTL window.
    - Partial upstream answers are merged over the fallback table.
    - Refresh runs under a lock (one in flight); the new map is built first and
      swapped in with a single assignment, so readers see either the old or
      the new batch, never a mix.
"""

SOURCE_LIVE = "live"
SOURCE_PARTIAL = "partial"
SOURCE_FALLBACK = "fallback"

logger = logging.getLogger("budgetfx.rates.cache")


class RateCache:
    """TTL-bound cache of USD based rates with fallback on upstream failure."""

    def __init__(
        self,
        provider: RateProvider,
        ttl_seconds: int = 3600,
        clock: Clock = utc_now,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._provider = provider
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: Dict[Currency, RateEntry] = {}
        self._last_fetch: Optional[datetime] = None
        self._last_source: Optional[str] = None
        self._lock = threading.Lock()

    # Internal --------------------------------------------------
    def _is_stale(self) -> bool:
        if not self._entries or self._last_fetch is None:
            return True
        return self._clock() - self._last_fetch > self._ttl

    def _refresh_locked(self) -> str:
        try:
            live = self._provider.fetch_usd_rates()
        except RateProviderError as e:
            logger.warning(
                "rate refresh failed, using fallback table: %s",
                e,
                extra={"source": SOURCE_FALLBACK, "provider": self._provider.name},
            )
            live = None
        except Exception:
            logger.warning(
                "rate provider %s raised unexpectedly, using fallback table",
                self._provider.name,
                exc_info=True,
                extra={"source": SOURCE_FALLBACK, "provider": self._provider.name},
            )
            live = None

        usable = {c: r for c, r in (live or {}).items() if r > 0 and math.isfinite(r)}
        merged = fallback_rates()
        merged.update(usable)
        merged[PIVOT_CURRENCY] = 1.0

        known = {c for c in usable if c != PIVOT_CURRENCY}
        if not known:
            source = SOURCE_FALLBACK
        elif len(known) == len(merged) - 1:
            source = SOURCE_LIVE
        else:
            source = SOURCE_PARTIAL

        now = self._clock()
        entries = {
            c: RateEntry(to_currency=c, rate=r, fetched_at=now)
            for c, r in merged.items()
        }
        # Swap the whole batch at once
        self._entries = entries
        self._last_fetch = now
        self._last_source = source
        if live is not None and source == SOURCE_FALLBACK:
            logger.warning("no usable upstream rates", extra={"source": source})
        elif source != SOURCE_FALLBACK:
            logger.info(
                "exchange rates updated from %s",
                self._provider.name,
                extra={"source": source, "provider": self._provider.name, "count": len(known)},
            )
        return source

    # Public API -----------------------------------------------
    def ensure_fresh(self) -> None:
        """Refresh if empty or older than the TTL."""
        if not self._is_stale():
            return
        with self._lock:
            # Another caller may have refreshed while we waited
            if self._is_stale():
                self._refresh_locked()

    def refresh(self) -> str:
        """Fetch a new batch regardless of age; returns the batch source."""
        with self._lock:
            return self._refresh_locked()

    def force_refresh(self) -> str:
        """User triggered refresh, bypassing the TTL check."""
        logger.info("forced rate refresh requested")
        return self.refresh()

    def get_rate(self, currency: Currency | str) -> float:
        """Units of `currency` per 1 USD."""
        currency = parse_currency(currency)
        self.ensure_fresh()
        return self._entries[currency].rate

    def list_rates(self) -> List[RateEntry]:
        self.ensure_fresh()
        entries = self._entries
        return [entries[c] for c in Currency if c in entries]

    @property
    def last_fetch(self) -> Optional[datetime]:
        return self._last_fetch

    @property
    def last_source(self) -> Optional[str]:
        return self._last_source

    @property
    def ttl(self) -> timedelta:
        return self._ttl


def build_rate_cache(
    settings: "Settings",
    provider: RateProvider | None = None,
    clock: Clock = utc_now,
) -> RateCache:
    """Wire a cache from settings; pass `provider` to bypass the configured kind."""
    if provider is None:
        provider = make_rate_provider(settings.exchange_rate_provider, settings)
    return RateCache(provider, ttl_seconds=settings.rates_cache_ttl_seconds, clock=clock)
