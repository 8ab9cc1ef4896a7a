"""Typed exceptions for the Discogs OAuth client."""


class DiscogsError(Exception):
    """Base exception for all Discogs client errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DiscogsAuthError(DiscogsError):
    """A handshake step failed."""

    kind = "auth"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        self.stage = stage  # e.g., "request_token", "access_token", "identity"
        super().__init__(message)


class NetworkError(DiscogsAuthError):
    """Transport failure or timeout reaching an endpoint."""

    kind = "network"

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        timed_out: bool = False,
    ) -> None:
        self.timed_out = timed_out
        super().__init__(message, stage=stage)


class ProtocolError(DiscogsAuthError):
    """Response received with a non-success status."""

    kind = "protocol"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str = "",
        stage: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message, stage=stage)


class MalformedResponseError(DiscogsAuthError):
    """Success status but the body lacks required fields."""

    kind = "malformed_response"

    def __init__(
        self,
        message: str,
        *,
        body: str,
        missing: tuple[str, ...] = (),
        stage: str | None = None,
    ) -> None:
        self.body = body
        self.missing = missing
        super().__init__(message, stage=stage)


class DiscogsValidationError(DiscogsError):
    """Local input validation error before anything is sent."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class HandshakeStateError(DiscogsError):
    """A login transition was invoked from the wrong state."""

    def __init__(self, message: str, *, state: str) -> None:
        self.state = state
        super().__init__(message)
