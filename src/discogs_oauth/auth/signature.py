"""OAuth 1.0a PLAINTEXT signing and Authorization header construction."""

import secrets
from collections.abc import Mapping
from urllib.parse import quote

SIGNATURE_METHOD = "PLAINTEXT"


def generate_nonce() -> str:
    """Generate a single-use random nonce (32 hex characters)."""
    return secrets.token_hex(16)


def plaintext_signature(consumer_secret: str, token_secret: str = "") -> str:
    """Build a PLAINTEXT signature.

    The token secret is empty before a request token has been issued.
    """
    return f"{consumer_secret}&{token_secret}"


def percent_encode(value: str) -> str:
    """Percent-encode a value per RFC 3986.

    Only unreserved characters (ALPHA / DIGIT / "-" / "." / "_" / "~") pass
    through; everything else, including ``!'()*``, is escaped.
    """
    return quote(value, safe="")


def build_auth_header(oauth_params: Mapping[str, str]) -> str:
    """Build OAuth Authorization header.

    Keys are sorted so that the output is stable for a given mapping.
    """
    auth_parts = [f'{k}="{percent_encode(v)}"' for k, v in sorted(oauth_params.items())]
    return "OAuth " + ", ".join(auth_parts)
