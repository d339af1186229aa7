"""Exception taxonomy for the search and trending pipeline."""


class MovieScoutError(Exception):
    """Base class for every error raised by MovieScout."""


class ConfigurationError(MovieScoutError):
    pass


# ── Metadata API ─────────────────────────────────────────────────────────────

class MetadataError(MovieScoutError):
    """A metadata request did not produce usable results."""


class TransportError(MetadataError):
    """Network, DNS or timeout failure talking to the metadata API."""


class HttpError(MetadataError):
    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code}")


class ProviderLogicalError(MetadataError):
    """2xx response whose payload reports a failure."""


class ParseError(MetadataError):
    """Payload could not be decoded into search results."""


# ── Trending store ───────────────────────────────────────────────────────────

class StoreError(MovieScoutError):
    """The trending store was unreachable or rejected the operation."""
