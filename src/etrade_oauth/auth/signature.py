"""OAuth 1.0a request signing (RFC 5849, section 3.4).

Everything here is a pure function: no network, no state, and the caller's
parameters are never mutated. The caller inserts the returned signature under
``oauth_signature`` itself.
"""

import base64
import hashlib
import hmac
from collections.abc import Iterable, Mapping
from typing import TypeAlias
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

SIGNATURE_METHODS = {
    "HMAC-SHA1": hashlib.sha1,
    "HMAC-SHA256": hashlib.sha256,
}

_DEFAULT_PORTS = {"http": 80, "https": 443}

Parameters: TypeAlias = Mapping[str, str] | Iterable[tuple[str, str]]


def percent_encode(value: str) -> str:
    """Percent-encode per RFC 3986 (only ``A-Za-z0-9-._~`` left as-is).

    Space becomes ``%20``, never ``+``.
    """
    return quote(value, safe="~")


def normalize_url(url: str) -> str:
    """Build the base string URI: lower-case scheme/host, no default port, no query."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def _pairs(params: Parameters) -> list[tuple[str, str]]:
    if isinstance(params, Mapping):
        return [(str(k), str(v)) for k, v in params.items()]
    return [(str(k), str(v)) for k, v in params]


def normalize_parameters(params: Parameters) -> str:
    """Canonical ``k1=v1&k2=v2`` string, sorted by encoded key then encoded value.

    ``oauth_signature`` is dropped if present.
    """
    encoded = sorted(
        (percent_encode(k), percent_encode(v))
        for k, v in _pairs(params)
        if k != "oauth_signature"
    )
    return "&".join(f"{k}={v}" for k, v in encoded)


def signature_base_string(method: str, url: str, params: Parameters) -> str:
    """Build ``METHOD&enc(url)&enc(params)``.

    Query parameters embedded in ``url`` are merged into the parameter set.
    """
    all_params = _pairs(params)
    query = urlsplit(url).query
    if query:
        all_params.extend(parse_qsl(query, keep_blank_values=True))

    return "&".join(
        [
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(all_params)),
        ]
    )


def signing_key(consumer_secret: str, token_secret: str | None = None) -> str:
    """Build the HMAC key. An absent token secret leaves the second half empty."""
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


def sign(
    method: str,
    url: str,
    params: Parameters,
    consumer_secret: str,
    token_secret: str | None = None,
    *,
    signature_method: str = "HMAC-SHA1",
) -> str:
    """Compute the base64-encoded OAuth 1.0a signature for a request.

    Raises:
        ValueError: If ``signature_method`` is not supported
    """
    digestmod = SIGNATURE_METHODS.get(signature_method)
    if digestmod is None:
        msg = f"Unsupported signature method: {signature_method}"
        raise ValueError(msg)

    base_string = signature_base_string(method, url, params)
    key = signing_key(consumer_secret, token_secret)

    digest = hmac.new(key.encode(), base_string.encode(), digestmod).digest()
    return base64.b64encode(digest).decode()
