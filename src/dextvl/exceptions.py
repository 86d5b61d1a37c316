"""Error taxonomy for TVL computation. Nothing here is retried or downgraded."""


class DexTvlError(Exception):
    """Base for all dextvl errors."""


class FatalDiscoveryError(DexTvlError):
    """Factory state needed to enumerate pairs could not be read."""


class RemoteCallFailure(DexTvlError):
    """A round-trip to the batch-RPC service failed (network, service or decoding)."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        response_body: object = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class BookkeepingViolation(DexTvlError):
    """Chunk or call counts do not add up. Always a bug, never a remote condition."""
