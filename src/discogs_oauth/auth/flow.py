"""Login handshake state machine.

A login moves strictly forward:

    idle -> requesting_token -> awaiting_authorization
         -> exchanging_token -> resolving_identity -> authenticated

and any of the three network states may end in ``failed``. Snapshots are
immutable; each transition returns a new one and the caller keeps whichever
snapshot it needs. Between ``start`` and ``complete`` the caller holds the
snapshot (and with it the request token) for as long as the user takes to
approve the login.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from discogs_oauth.exceptions import (
    DiscogsAuthError,
    DiscogsValidationError,
    HandshakeStateError,
)
from discogs_oauth.models.auth import AuthorizationCallback

if TYPE_CHECKING:
    from discogs_oauth.auth.oauth import DiscogsAuth
    from discogs_oauth.models.auth import AccessToken, AppCredential, Identity, RequestToken

logger = logging.getLogger(__name__)


class HandshakeState(StrEnum):
    """Login handshake states."""

    IDLE = "idle"
    REQUESTING_TOKEN = "requesting_token"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    EXCHANGING_TOKEN = "exchanging_token"
    RESOLVING_IDENTITY = "resolving_identity"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class HandshakeFailure:
    """Where and how a handshake failed."""

    step: HandshakeState
    error: DiscogsAuthError = field(compare=False)

    @property
    def error_kind(self) -> str:
        """Error category: "network", "protocol" or "malformed_response"."""
        return self.error.kind


@dataclass(frozen=True, slots=True)
class Handshake:
    """Immutable snapshot of one login attempt."""

    state: HandshakeState = HandshakeState.IDLE
    request_token: RequestToken | None = None
    access_token: AccessToken | None = None
    identity: Identity | None = None
    failure: HandshakeFailure | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is HandshakeState.AUTHENTICATED

    @property
    def is_failed(self) -> bool:
        return self.state is HandshakeState.FAILED

    def raise_for_failure(self) -> None:
        """Re-raise the error that failed this handshake, if any."""
        if self.failure is not None:
            raise self.failure.error

    def rewind(self) -> Handshake:
        """Return the snapshot to retry a failed step from.

        A failed token request rewinds to idle; a failed exchange rewinds to
        awaiting_authorization with the same request token. A failed identity
        resolution cannot be rewound because the verifier has been spent;
        retry it with ``DiscogsAuth.fetch_identity`` and ``access_token``.
        """
        if self.failure is None:
            raise HandshakeStateError("Only a failed handshake can be rewound", state=self.state)

        if self.failure.step is HandshakeState.REQUESTING_TOKEN:
            return Handshake()
        if self.failure.step is HandshakeState.EXCHANGING_TOKEN:
            return Handshake(
                state=HandshakeState.AWAITING_AUTHORIZATION,
                request_token=self.request_token,
            )
        raise HandshakeStateError(
            f"Cannot rewind a handshake that failed in {self.failure.step}",
            state=self.state,
        )


class LoginFlow:
    """Drives a Handshake through its transitions for one application.

    Holds only the static inputs shared by every login (auth handler,
    application credential, callback URL), so a single flow can run many
    handshakes concurrently.

    Usage:
        flow = LoginFlow(auth, config.credential, "https://example.com/callback")
        pending = await flow.start()
        pending.raise_for_failure()
        redirect_user_to(pending.request_token.authorization_url)
        ...
        done = await flow.complete_from_callback(pending, callback_url)
        done.raise_for_failure()
        print(done.identity.username)
    """

    def __init__(
        self,
        auth: DiscogsAuth,
        credential: AppCredential,
        callback_url: str,
        *,
        on_transition: Callable[[Handshake], None] | None = None,
    ) -> None:
        self.auth = auth
        self.credential = credential
        self.callback_url = callback_url
        self._on_transition = on_transition

    async def start(self, handshake: Handshake | None = None) -> Handshake:
        """idle -> awaiting_authorization (or failed)."""
        handshake = handshake or Handshake()
        self._require(handshake, HandshakeState.IDLE)
        if not self.callback_url:
            raise DiscogsValidationError("callback_url is required", field="callback_url")

        current = self._enter(replace(handshake, state=HandshakeState.REQUESTING_TOKEN))
        try:
            request_token = await self.auth.request_token(self.credential, self.callback_url)
        except DiscogsAuthError as e:
            return self._fail(current, e)

        return self._enter(
            replace(
                current,
                state=HandshakeState.AWAITING_AUTHORIZATION,
                request_token=request_token,
            )
        )

    async def complete(self, handshake: Handshake, verifier: str) -> Handshake:
        """awaiting_authorization -> authenticated (or failed)."""
        self._require(handshake, HandshakeState.AWAITING_AUTHORIZATION)
        request_token = handshake.request_token
        if request_token is None:
            raise HandshakeStateError("Handshake holds no request token", state=handshake.state)
        if not verifier:
            raise DiscogsValidationError("verifier is required", field="verifier")

        current = self._enter(replace(handshake, state=HandshakeState.EXCHANGING_TOKEN))
        try:
            access_token = await self.auth.access_token(self.credential, request_token, verifier)
        except DiscogsAuthError as e:
            return self._fail(current, e)

        current = self._enter(
            replace(
                current,
                state=HandshakeState.RESOLVING_IDENTITY,
                access_token=access_token,
            )
        )
        try:
            identity = await self.auth.fetch_identity(self.credential, access_token)
        except DiscogsAuthError as e:
            return self._fail(current, e)

        return self._enter(
            replace(
                current,
                state=HandshakeState.AUTHENTICATED,
                request_token=None,
                identity=identity,
            )
        )

    async def complete_from_callback(self, handshake: Handshake, callback_url: str) -> Handshake:
        """Complete the handshake from the URL the user was redirected to.

        Raises:
            DiscogsValidationError: If the callback is malformed or belongs to
                a different request token
        """
        self._require(handshake, HandshakeState.AWAITING_AUTHORIZATION)
        callback = AuthorizationCallback.from_url(callback_url)

        if handshake.request_token is None or callback.oauth_token != handshake.request_token.token:
            raise DiscogsValidationError(
                "Callback was issued for a different request token",
                field="oauth_token",
            )

        return await self.complete(handshake, callback.oauth_verifier)

    def _require(self, handshake: Handshake, expected: HandshakeState) -> None:
        if handshake.state is not expected:
            raise HandshakeStateError(
                f"Expected handshake in {expected}, got {handshake.state}",
                state=handshake.state,
            )

    def _enter(self, handshake: Handshake) -> Handshake:
        logger.debug("Handshake state: %s", handshake.state)
        if self._on_transition is not None:
            self._on_transition(handshake)
        return handshake

    def _fail(self, handshake: Handshake, error: DiscogsAuthError) -> Handshake:
        logger.info("Handshake failed in %s: %s", handshake.state, error.message)
        return self._enter(
            replace(
                handshake,
                state=HandshakeState.FAILED,
                failure=HandshakeFailure(step=handshake.state, error=error),
            )
        )
