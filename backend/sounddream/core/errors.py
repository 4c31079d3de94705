class DataAccessError(Exception):
    """Reading from the interaction store failed.

    Raised as a single opaque failure; callers decide how to answer (the HTTP
    layer turns it into a 503). The recommender never retries.
    """


class StoreTimeoutError(DataAccessError):
    """The interaction store did not answer before the caller's deadline."""
