class FarescrapeError(Exception):
    """Base class for errors raised by farescrape."""


class ConfigurationError(FarescrapeError):
    """Required settings (datastore credentials) are missing."""


class NavigationError(FarescrapeError):
    """The results page never finished loading."""
