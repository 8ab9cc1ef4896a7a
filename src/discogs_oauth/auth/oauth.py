"""OAuth 1.0a authentication for the Discogs API."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlencode

import httpx

from discogs_oauth.auth.signature import (
    SIGNATURE_METHOD,
    build_auth_header,
    generate_nonce,
    plaintext_signature,
)
from discogs_oauth.exceptions import (
    DiscogsAuthError,
    DiscogsValidationError,
    MalformedResponseError,
    NetworkError,
    ProtocolError,
)
from discogs_oauth.models.auth import (
    AccessToken,
    AvatarFound,
    AvatarIgnored,
    Identity,
    RequestToken,
)

if TYPE_CHECKING:
    from discogs_oauth.config import DiscogsConfig
    from discogs_oauth.models.auth import AppCredential, AvatarLookup

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _read_body(response: httpx.Response) -> str:
    """Best-effort response text for error reporting."""
    try:
        return response.text
    except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError):
        return ""


class DiscogsAuth:
    """OAuth 1.0a handshake against the Discogs API.

    Implements the three-legged flow with the PLAINTEXT signature method:
    1. Get request token
    2. User authorization on discogs.com (handled by the caller)
    3. Exchange verifier for access token
    4. Resolve the authenticated identity

    Instances hold no per-login state. Every token and secret a step needs is
    passed in as an argument, so one instance can serve any number of
    concurrent logins.
    """

    def __init__(
        self,
        config: DiscogsConfig,
        http_client: httpx.AsyncClient | None = None,
        *,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Endpoint URLs, User-Agent and timeout
            http_client: Optional shared httpx.AsyncClient. If not provided,
                        each request creates its own connection.
            nonce_factory: Source of single-use nonces
            clock: Source of the current Unix time
        """
        self.config = config
        self._http_client = http_client
        self._nonce_factory = nonce_factory
        self._clock = clock

    def set_http_client(self, http_client: httpx.AsyncClient | None) -> None:
        """Set the shared HTTP client for connection pooling."""
        self._http_client = http_client

    async def request_token(self, credential: AppCredential, callback_url: str) -> RequestToken:
        """Step 1: Get a request token to start OAuth flow.

        Args:
            credential: Application consumer key pair
            callback_url: Where Discogs redirects the user after approval

        Returns:
            RequestToken with the authorization URL the user must visit
        """
        if not callback_url:
            raise DiscogsValidationError("callback_url is required", field="callback_url")

        oauth_params = self._build_oauth_params(credential)
        oauth_params["oauth_callback"] = callback_url

        response = await self._send(
            "POST", self.config.request_token_url, oauth_params, stage="request_token"
        )
        token, token_secret = self._parse_token_response(response, stage="request_token")
        logger.info("Obtained request token")

        return RequestToken(
            token=token,
            token_secret=token_secret,
            authorization_url=f"{self.config.authorize_url}?{urlencode({'oauth_token': token})}",
        )

    async def access_token(
        self,
        credential: AppCredential,
        request_token: RequestToken,
        verifier: str,
    ) -> AccessToken:
        """Step 2: Exchange verifier code for access token.

        The verifier must have been issued for ``request_token``; Discogs
        rejects any other pairing and the rejection surfaces as ProtocolError.

        Args:
            credential: Application consumer key pair
            request_token: The request token the user approved
            verifier: The oauth_verifier from the authorization redirect

        Returns:
            AccessToken for API access
        """
        if not verifier:
            raise DiscogsValidationError("verifier is required", field="verifier")

        oauth_params = self._build_oauth_params(
            credential,
            token=request_token.token,
            token_secret=request_token.token_secret,
        )
        oauth_params["oauth_verifier"] = verifier

        response = await self._send(
            "POST", self.config.access_token_url, oauth_params, stage="access_token"
        )
        token, token_secret = self._parse_token_response(response, stage="access_token")
        logger.info("Exchanged verifier for access token")

        return AccessToken(token=token, token_secret=token_secret)

    async def fetch_identity(self, credential: AppCredential, access_token: AccessToken) -> Identity:
        """Step 3: Resolve the authenticated user's username and avatar.

        Only the identity call is fatal. The avatar comes from a separate
        profile lookup and is empty if that lookup fails in any way.
        """
        oauth_params = self._build_oauth_params(
            credential,
            token=access_token.token,
            token_secret=access_token.token_secret,
        )
        response = await self._send("GET", self.config.identity_url, oauth_params, stage="identity")
        data = self._parse_json(response, stage="identity")

        username = data.get("username")
        if not isinstance(username, str) or not username:
            raise MalformedResponseError(
                "Discogs identity response missing username",
                body=_read_body(response),
                missing=("username",),
                stage="identity",
            )
        logger.info("Resolved identity for %s", username)

        avatar = await self.lookup_avatar(credential, access_token, username)
        return Identity.from_lookup(username, avatar)

    async def lookup_avatar(
        self,
        credential: AppCredential,
        access_token: AccessToken,
        username: str,
    ) -> AvatarLookup:
        """Look up a user's avatar URL from their profile.

        Never raises for request failures: the outcome is AvatarFound or
        AvatarIgnored with the reason.
        """
        oauth_params = self._build_oauth_params(
            credential,
            token=access_token.token,
            token_secret=access_token.token_secret,
        )
        try:
            response = await self._send(
                "GET", self.config.profile_url(username), oauth_params, stage="profile"
            )
            data = self._parse_json(response, stage="profile")
        except DiscogsAuthError as e:
            logger.warning("Ignoring avatar lookup failure for %s: %s", username, e.message)
            return AvatarIgnored(reason=e.message)

        avatar_url = data.get("avatar_url")
        if not isinstance(avatar_url, str) or not avatar_url:
            logger.debug("Profile for %s has no avatar_url", username)
            return AvatarIgnored(reason="Profile has no avatar_url")

        return AvatarFound(url=avatar_url)

    def _build_oauth_params(
        self,
        credential: AppCredential,
        *,
        token: str | None = None,
        token_secret: str = "",
    ) -> dict[str, str]:
        """Build base OAuth parameters with a fresh nonce and timestamp."""
        oauth_params = {
            "oauth_consumer_key": credential.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature": plaintext_signature(credential.consumer_secret, token_secret),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(int(self._clock())),
        }
        if token is not None:
            oauth_params["oauth_token"] = token
        return oauth_params

    async def _send(
        self,
        method: str,
        url: str,
        oauth_params: dict[str, str],
        *,
        stage: str,
    ) -> httpx.Response:
        """Send one signed request and check its status.

        Raises:
            NetworkError: On transport failure or timeout
            ProtocolError: On a non-2xx response
        """
        headers = {
            "Authorization": build_auth_header(oauth_params),
            "User-Agent": self.config.user_agent,
        }
        if method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE

        logger.debug("Request: %s %s", method, url)

        if self._http_client is not None:
            return await self._exchange(self._http_client, method, url, headers, stage=stage)

        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            return await self._exchange(client, method, url, headers, stage=stage)

    async def _exchange(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        stage: str,
    ) -> httpx.Response:
        """Stream the response so its status is known before the body is read."""
        request = client.build_request(method, url, headers=headers, timeout=self.config.timeout)
        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            raise self._network_error(e, stage=stage) from e

        try:
            logger.debug("Response: %s %s -> %s", method, url, response.status_code)

            if not response.is_success:
                try:
                    await response.aread()
                    body = response.text
                except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError):
                    body = ""
                raise ProtocolError(
                    f"Discogs {stage} failed ({response.status_code}): {body}",
                    status_code=response.status_code,
                    body=body,
                    stage=stage,
                )

            try:
                await response.aread()
            except httpx.RequestError as e:
                raise self._network_error(e, stage=stage) from e
        finally:
            await response.aclose()

        return response

    def _network_error(self, error: httpx.RequestError, *, stage: str) -> NetworkError:
        if isinstance(error, httpx.TimeoutException):
            return NetworkError(
                f"Discogs {stage} timed out after {self.config.timeout}s",
                stage=stage,
                timed_out=True,
            )
        return NetworkError(f"Discogs {stage} request failed: {error}", stage=stage)

    def _parse_token_response(self, response: httpx.Response, *, stage: str) -> tuple[str, str]:
        """Extract oauth_token and oauth_token_secret from a form-encoded body."""
        text = response.text
        data = parse_qs(text)
        token = data.get("oauth_token", [""])[0]
        token_secret = data.get("oauth_token_secret", [""])[0]

        missing = tuple(
            name
            for name, value in (("oauth_token", token), ("oauth_token_secret", token_secret))
            if not value
        )
        if missing:
            raise MalformedResponseError(
                f"Discogs {stage} response missing expected fields: {text}",
                body=text,
                missing=missing,
                stage=stage,
            )

        return token, token_secret

    def _parse_json(self, response: httpx.Response, *, stage: str) -> dict[str, Any]:
        """Decode a JSON object body."""
        text = _read_body(response)
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Discogs {stage} response is not valid JSON: {text}",
                body=text,
                stage=stage,
            ) from e

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Discogs {stage} response is not a JSON object: {text}",
                body=text,
                stage=stage,
            )

        result: dict[str, Any] = data
        return result
