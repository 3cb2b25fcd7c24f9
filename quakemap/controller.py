"""Refresh Controller - Wires Functional Core and Imperative Shell.

This module turns the two UI inputs (window selection and manual refresh)
into fetches, and every fetch into exactly one commit on the EventStore.
It's the only writer of the store.

Fetches never cancel each other. Each trigger takes a fresh token from the
store; when an older fetch finishes late its commit is rejected by the
token check, so the newest *issued* fetch wins regardless of arrival order.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

from quakemap.core.errors import FetchError, MalformedFeedError
from quakemap.core.event import TimeWindow, normalize
from quakemap.shell.feed_client import FeedClient
from quakemap.store import EventStore, FetchResult, FetchToken


logger = logging.getLogger(__name__)


class AttemptPhase(str, Enum):
    """Lifecycle of a single fetch attempt."""
    IDLE = "idle"
    FETCHING = "fetching"
    SETTLED = "settled"


@dataclass
class FetchAttempt:
    """One triggered fetch.

    Attributes:
        token: Store token for this attempt
        phase: Current lifecycle phase
        result: Outcome once settled
        applied: Whether the result was committed (False if superseded)
        future: Executor future completing when the attempt settles
    """
    token: FetchToken
    phase: AttemptPhase = AttemptPhase.IDLE
    result: FetchResult | None = None
    applied: bool = False
    future: Future | None = field(default=None, repr=False)

    @property
    def window(self) -> TimeWindow:
        return self.token.window


class RefreshController:
    """Coordinates feed fetches and store commits.

    This class wires together:
    - Feed client (fetches raw records)
    - Core normalizer (raw records -> events)
    - Event store (token-checked state)
    """

    def __init__(
        self,
        store: EventStore,
        feed_client: FeedClient | None = None,
        executor: Executor | None = None,
        max_workers: int = 4,
    ) -> None:
        """Initialize controller.

        Args:
            store: Event store this controller writes to
            feed_client: Feed client (created if not provided)
            executor: Executor running fetches (thread pool if not provided)
            max_workers: Thread pool size when no executor is given
        """
        self.store = store
        self.feed_client = feed_client or FeedClient()
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="quakemap-fetch",
        )

    def start(self) -> FetchAttempt:
        """Issue the initial fetch for the store's selected window."""
        return self.trigger_fetch(self.store.window)

    def on_window_change(self, window: TimeWindow) -> FetchAttempt | None:
        """Select a new window and fetch it.

        Returns:
            The new attempt, or None if window was already selected
        """
        if window == self.store.window:
            return None

        logger.info("Window changed to %s", window.value)
        self.store.set_window(window)
        return self.trigger_fetch(window)

    def on_manual_refresh(self) -> FetchAttempt:
        """Fetch the current window again, even if a fetch is in flight."""
        return self.trigger_fetch(self.store.window)

    def trigger_fetch(self, window: TimeWindow) -> FetchAttempt:
        """Start an asynchronous fetch for window.

        Returns immediately. The attempt's future completes once the result
        has been offered to the store.

        Args:
            window: Time window to fetch

        Returns:
            FetchAttempt tracking the fetch
        """
        token = self.store.begin_fetch(window)
        attempt = FetchAttempt(token=token)
        try:
            attempt.future = self.executor.submit(self._run, attempt)
        except Exception as e:
            # e.g. submit after shutdown(); settle now so the store leaves Loading
            logger.error("Could not schedule %s fetch: %s", window.value, e)
            attempt.result = FetchResult.failed(FetchError(window, e))
            attempt.applied = self.store.commit(token, attempt.result)
            attempt.phase = AttemptPhase.SETTLED
            attempt.future = Future()
            attempt.future.set_result(attempt)
        return attempt

    def _fetch(self, window: TimeWindow) -> FetchResult:
        """Fetch and normalize one window, capturing every failure."""
        try:
            raw_features = self.feed_client.fetch(window)
            normalized = normalize(raw_features)
        except FetchError as e:
            return FetchResult.failed(e)
        except MalformedFeedError as e:
            logger.warning("Malformed %s feed: %s", window.value, e)
            return FetchResult.failed(FetchError(window, e))
        except Exception as e:
            logger.exception("Unexpected error fetching %s feed", window.value)
            return FetchResult.failed(FetchError(window, e))

        if normalized.skipped:
            logger.info(
                "Skipped %d unusable records in %s feed",
                normalized.skipped,
                window.value,
            )

        return FetchResult.loaded(normalized)

    def _run(self, attempt: FetchAttempt) -> FetchAttempt:
        attempt.phase = AttemptPhase.FETCHING
        result = self._fetch(attempt.window)

        attempt.result = result
        attempt.applied = self.store.commit(attempt.token, result)
        attempt.phase = AttemptPhase.SETTLED

        if not attempt.applied:
            logger.info(
                "Discarded superseded %s fetch (generation %d)",
                attempt.window.value,
                attempt.token.generation,
            )
        elif result.ok:
            logger.info(
                "Loaded %d events for %s",
                len(result.events),
                attempt.window.value,
            )
        else:
            logger.error("Refresh failed: %s", result.error)

        return attempt

    def shutdown(self, wait: bool = True) -> None:
        """Stop the executor if this controller created it."""
        if self._owns_executor:
            self.executor.shutdown(wait=wait)
