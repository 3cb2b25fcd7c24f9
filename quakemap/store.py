"""Event Store - the single owner of view state.

Holds the selected time window, the fetch state and the last successfully
loaded snapshot. Writers obtain a token from begin_fetch() and hand it back
to commit(); only the most recently issued token may change the snapshot,
so a slow response for a superseded fetch can never overwrite newer data.

Readers (the renderer, the HTTP layer) may call current_events() and
is_loading() from any thread without waiting on an in-flight fetch.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from quakemap.core.errors import FetchError
from quakemap.core.event import NormalizationResult, SeismicEvent, TimeWindow


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """No fetch has been issued yet."""


@dataclass(frozen=True)
class Loading:
    """A fetch for window is in flight."""
    window: TimeWindow


@dataclass(frozen=True)
class Loaded:
    """The latest fetch for window succeeded."""
    window: TimeWindow
    events: tuple[SeismicEvent, ...]


@dataclass(frozen=True)
class Failed:
    """The latest fetch for window failed."""
    window: TimeWindow
    error: FetchError


FetchState = Idle | Loading | Loaded | Failed


@dataclass(frozen=True, order=True)
class FetchToken:
    """Opaque identifier of one fetch generation.

    Attributes:
        generation: Monotonically increasing issue number
        window: Window the fetch was issued for
    """
    generation: int
    window: TimeWindow = field(compare=False)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a fetch attempt, ready to be committed.

    Attributes:
        events: Normalized events (empty on failure)
        skipped: Records dropped during normalization
        error: Failure cause, None on success
    """
    events: tuple[SeismicEvent, ...] = ()
    skipped: int = 0
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        """Returns True if the fetch succeeded."""
        return self.error is None

    @classmethod
    def loaded(cls, normalized: NormalizationResult) -> "FetchResult":
        return cls(events=normalized.events, skipped=normalized.skipped)

    @classmethod
    def failed(cls, error: FetchError) -> "FetchResult":
        return cls(error=error)


StoreListener = Callable[["EventStore"], None]


class EventStore:
    """Thread-safe container for the view's state.

    All mutation goes through begin_fetch()/commit(); a lock keeps token
    issuance and comparison atomic.
    """

    def __init__(self, window: TimeWindow = TimeWindow.DAY) -> None:
        """Initialize an idle store.

        Args:
            window: Initially selected time window
        """
        self._lock = threading.Lock()
        self._window = window
        self._state: FetchState = Idle()
        self._events: tuple[SeismicEvent, ...] = ()
        self._events_window: TimeWindow | None = None
        self._generation = 0
        self._last_skipped = 0
        self._last_error: FetchError | None = None
        self._listeners: list[StoreListener] = []

    @property
    def window(self) -> TimeWindow:
        """Currently selected time window."""
        with self._lock:
            return self._window

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        """Generation number of the most recently issued token (0 if none)."""
        with self._lock:
            return self._generation

    @property
    def events_window(self) -> TimeWindow | None:
        """Window of the current snapshot, None until a fetch has loaded."""
        with self._lock:
            return self._events_window

    @property
    def last_skipped(self) -> int:
        """Records skipped by the last successful commit."""
        with self._lock:
            return self._last_skipped

    @property
    def last_error(self) -> FetchError | None:
        """Error of the last commit, None if it succeeded."""
        with self._lock:
            return self._last_error

    def set_window(self, window: TimeWindow) -> None:
        """Record the selected window. Does not fetch."""
        with self._lock:
            self._window = window

    def begin_fetch(self, window: TimeWindow) -> FetchToken:
        """Start a new fetch generation for window.

        Any fetch still in flight is superseded: its token will no longer
        match when it tries to commit.

        Returns:
            Token identifying this generation
        """
        with self._lock:
            self._generation += 1
            self._state = Loading(window)
            token = FetchToken(generation=self._generation, window=window)

        logger.debug("Began fetch generation %d for %s", token.generation, window.value)
        return token

    def commit(self, token: FetchToken, result: FetchResult) -> bool:
        """Apply a fetch result if its token is the latest issued.

        A successful result replaces the snapshot wholesale. A failed
        result keeps the previous snapshot visible.

        Args:
            token: Token returned by begin_fetch()
            result: Fetch outcome

        Returns:
            True if applied, False if the token was stale
        """
        with self._lock:
            if token.generation != self._generation:
                logger.debug(
                    "Discarding stale result for generation %d (latest is %d)",
                    token.generation,
                    self._generation,
                )
                return False

            if result.ok:
                self._events = tuple(result.events)
                self._events_window = token.window
                self._last_skipped = result.skipped
                self._last_error = None
                self._state = Loaded(token.window, self._events)
            else:
                self._last_error = result.error
                self._state = Failed(token.window, result.error)

            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener failed")

        return True

    def current_events(self) -> list[SeismicEvent]:
        """Snapshot of the last successfully loaded events."""
        with self._lock:
            return list(self._events)

    def is_loading(self) -> bool:
        with self._lock:
            return isinstance(self._state, Loading)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a callback run after every applied commit.

        Returns:
            Function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
