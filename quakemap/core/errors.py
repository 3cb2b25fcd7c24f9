"""Error taxonomy for the feed pipeline.

Per-record problems are never errors: the normalizer skips and counts them.
Only a broken container or a failed fetch is surfaced as an exception.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quakemap.core.event import TimeWindow


class MalformedFeedError(ValueError):
    """The feed payload is not a container of feature records."""


class FetchError(Exception):
    """A feed fetch failed (transport, non-2xx status or unparseable body).

    Attributes:
        window: The time window the fetch was issued for
        cause: The underlying exception
    """

    def __init__(self, window: "TimeWindow", cause: BaseException) -> None:
        self.window = window
        self.cause = cause
        super().__init__(f"Failed to fetch {window.value} feed: {cause}")
