"""In-memory Discogs OAuth endpoints for tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from urllib.parse import unquote, urlencode

import httpx

from discogs_oauth import DiscogsConfig

Handler = Callable[[httpx.Request], httpx.Response]


def parse_auth_header(header: str) -> dict[str, str]:
    """Parse an `OAuth k="v", ...` header back into decoded parameters."""
    assert header.startswith("OAuth ")
    params: dict[str, str] = {}
    for part in header[len("OAuth ") :].split(", "):
        key, _, quoted = part.partition("=")
        assert quoted.startswith('"') and quoted.endswith('"')
        params[key] = unquote(quoted[1:-1])
    return params


class FakeDiscogs:
    """Stateful stand-in for the Discogs OAuth endpoints.

    Issues numbered request tokens ("req1", "req2", ...). A request token is
    approved by calling ``approve``, which returns the verifier Discogs would
    append to the callback URL. Verifiers are only accepted together with the
    secret of the request token they were issued for.
    """

    def __init__(self, config: DiscogsConfig) -> None:
        self.config = config
        self.requests: list[httpx.Request] = []
        self.request_secrets: dict[str, str] = {}
        self.approvals: dict[str, tuple[str, str]] = {}  # token -> (verifier, username)
        self.access_tokens: dict[str, tuple[str, str]] = {}  # token -> (secret, username)
        self.avatar_url: str | None = "https://i.discogs.com/avatar/crate_digger.jpg"
        self.profile_handler: Handler | None = None
        self._counter = itertools.count(1)

    def approve(self, request_token: str, username: str) -> str:
        """Simulate the user approving access on discogs.com."""
        verifier = f"verifier-{request_token}"
        self.approvals[request_token] = (verifier, username)
        return verifier

    def auth_params(self, index: int = -1) -> dict[str, str]:
        """Decoded Authorization parameters of a recorded request."""
        return parse_auth_header(self.requests[index].headers["Authorization"])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = parse_auth_header(request.headers["Authorization"])
        secret = self.config.consumer_secret

        if params.get("oauth_consumer_key") != self.config.consumer_key:
            return httpx.Response(401, text="invalid consumer")

        path = request.url.path
        if path == "/oauth/request_token":
            if params["oauth_signature"] != f"{secret}&":
                return httpx.Response(401, text="invalid signature")
            n = next(self._counter)
            token, token_secret = f"req{n}", f"req-secret-{n}"
            self.request_secrets[token] = token_secret
            return httpx.Response(
                200, text=urlencode({"oauth_token": token, "oauth_token_secret": token_secret})
            )

        if path == "/oauth/access_token":
            token = params.get("oauth_token", "")
            expected_secret = self.request_secrets.get(token)
            approval = self.approvals.get(token)
            if (
                expected_secret is None
                or approval is None
                or params["oauth_signature"] != f"{secret}&{expected_secret}"
                or params.get("oauth_verifier") != approval[0]
            ):
                return httpx.Response(401, text="Invalid verifier")
            del self.request_secrets[token]
            n = next(self._counter)
            access, access_secret = f"access{n}", f"access-secret-{n}"
            self.access_tokens[access] = (access_secret, approval[1])
            return httpx.Response(
                200, text=urlencode({"oauth_token": access, "oauth_token_secret": access_secret})
            )

        username = self._authorized_user(params)
        if username is None:
            return httpx.Response(401, json={"message": "You must authenticate to access this resource."})

        if path == "/oauth/identity":
            return httpx.Response(200, json={"id": 1, "username": username, "consumer_name": "Test"})

        if path.startswith("/users/"):
            if self.profile_handler is not None:
                return self.profile_handler(request)
            profile: dict[str, object] = {"id": 1, "username": username}
            if self.avatar_url is not None:
                profile["avatar_url"] = self.avatar_url
            return httpx.Response(200, json=profile)

        return httpx.Response(404, json={"message": "The requested resource was not found."})

    def _authorized_user(self, params: dict[str, str]) -> str | None:
        entry = self.access_tokens.get(params.get("oauth_token", ""))
        if entry is None:
            return None
        token_secret, username = entry
        if params["oauth_signature"] != f"{self.config.consumer_secret}&{token_secret}":
            return None
        return username

