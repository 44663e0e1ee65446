"""Error kinds raised while driving the browser.

Only ``LaunchError`` is meant to escape a request. Everything else is
per-candidate and ends up as a note on an attempt record.
"""


class ScrapeError(Exception):
    kind = 'scrape_error'

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class LaunchError(ScrapeError):
    """The browser process could not be started."""
    kind = 'launch_error'


class ContextError(ScrapeError):
    """A context/page could not be created for a candidate."""
    kind = 'context_error'


class NavigationError(ScrapeError):
    """goto() failed or timed out."""
    kind = 'navigation_error'


class BlockDetected(ScrapeError):
    kind = 'block_detected'


class NoMeaningfulData(ScrapeError):
    kind = 'no_meaningful_data'
