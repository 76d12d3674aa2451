# src/mesofetcher/errors.py


class MesoFetcherError(Exception):
    """Base class for failures that abort a fetcher run."""


class CatalogUnavailable(MesoFetcherError):
    """The monster stat catalog could not be read or parsed."""


class StoreQueryFailed(MesoFetcherError):
    """Connecting to the drop store or running the audit query failed."""
