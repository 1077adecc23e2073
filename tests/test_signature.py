"""Tests for OAuth 1.0a signature construction."""

import base64
import hashlib
import hmac

import pytest

from etrade_oauth.auth.signature import (
    normalize_parameters,
    normalize_url,
    percent_encode,
    sign,
    signature_base_string,
    signing_key,
)

REQUEST_TOKEN_PARAMS = {
    "oauth_consumer_key": "K1",
    "oauth_nonce": "N",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_timestamp": "T",
    "oauth_version": "1.0",
}


class TestPercentEncode:
    """Tests for RFC 3986 percent-encoding."""

    def test_leaves_unreserved_characters(self) -> None:
        """Letters, digits and -._~ should pass through unchanged."""
        value = "AZaz09-._~"
        assert percent_encode(value) == value

    def test_encodes_space_as_percent_20(self) -> None:
        """Space must be %20, never +."""
        assert percent_encode("a b") == "a%20b"

    def test_encodes_reserved_characters(self) -> None:
        """Reserved characters should be encoded with upper-case hex."""
        assert percent_encode("a+b/c=d&e") == "a%2Bb%2Fc%3Dd%26e"

    def test_encodes_utf8(self) -> None:
        """Non-ASCII should be encoded as UTF-8 octets."""
        assert percent_encode("é") == "%C3%A9"


class TestNormalizeUrl:
    """Tests for base string URI construction."""

    def test_strips_query_and_fragment(self) -> None:
        assert normalize_url("https://host/oauth/request_token?x=1#frag") == (
            "https://host/oauth/request_token"
        )

    def test_lowercases_scheme_and_host(self) -> None:
        """Scheme and host are case-insensitive, path is not."""
        assert normalize_url("HTTPS://Api.Etrade.COM/OAuth") == "https://api.etrade.com/OAuth"

    def test_drops_default_port(self) -> None:
        assert normalize_url("https://host:443/path") == "https://host/path"
        assert normalize_url("http://host:80/path") == "http://host/path"

    def test_keeps_non_default_port(self) -> None:
        assert normalize_url("https://host:8443/path") == "https://host:8443/path"


class TestNormalizeParameters:
    """Tests for canonical parameter string construction."""

    def test_sorts_by_key(self) -> None:
        assert normalize_parameters({"b": "2", "a": "1", "c": "3"}) == "a=1&b=2&c=3"

    def test_sorts_duplicate_keys_by_value(self) -> None:
        """Duplicate keys should be ordered by their encoded values."""
        assert normalize_parameters([("a", "2"), ("a", "1")]) == "a=1&a=2"

    def test_resorting_sorted_input_is_noop(self) -> None:
        """Already-canonical input should produce the same string in any order."""
        canonical = normalize_parameters(REQUEST_TOKEN_PARAMS)
        reordered = dict(reversed(list(REQUEST_TOKEN_PARAMS.items())))

        assert normalize_parameters(reordered) == canonical
        assert normalize_parameters(sorted(REQUEST_TOKEN_PARAMS.items())) == canonical

    def test_excludes_signature(self) -> None:
        """The signature must never be part of its own base string."""
        params = {**REQUEST_TOKEN_PARAMS, "oauth_signature": "abc"}

        assert "oauth_signature=" not in normalize_parameters(params)

    def test_encodes_before_sorting(self) -> None:
        """Keys and values should be percent-encoded in the output."""
        assert normalize_parameters({"q": "a b", "z": "+"}) == "q=a%20b&z=%2B"


class TestSignatureBaseString:
    """Tests for signature base string construction."""

    def test_matches_canonical_request_token_string(self) -> None:
        """Base string for a request-token GET should match the RFC layout."""
        base = signature_base_string(
            "GET", "https://host/oauth/request_token", REQUEST_TOKEN_PARAMS
        )

        assert base == (
            "GET&https%3A%2F%2Fhost%2Foauth%2Frequest_token&"
            "oauth_consumer_key%3DK1%26oauth_nonce%3DN%26"
            "oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3DT%26"
            "oauth_version%3D1.0"
        )

    def test_uppercases_method(self) -> None:
        base = signature_base_string("get", "https://host/x", {"a": "1"})

        assert base.startswith("GET&")

    def test_merges_query_parameters(self) -> None:
        """Query parameters belong in the parameter set, not the URL part."""
        base = signature_base_string("GET", "https://host/x?b=2", {"a": "1"})

        assert base == "GET&https%3A%2F%2Fhost%2Fx&a%3D1%26b%3D2"


class TestSign:
    """Tests for signature generation."""

    def test_known_hmac_sha1_vector(self) -> None:
        """Should reproduce the classic OAuth 1.0 photos.example.net signature."""
        params = {
            "oauth_consumer_key": "dpf43f3p2l4k3l03",
            "oauth_token": "nnch734d00sl2jdk",
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": "1191242096",
            "oauth_nonce": "kllo9940pd9333jh",
            "oauth_version": "1.0",
        }

        signature = sign(
            "GET",
            "http://photos.example.net/photos?file=vacation.jpg&size=original",
            params,
            "kd94hf93k423kf44",
            "pfkkdhi9sl3r4s00",
        )

        assert signature == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="

    def test_signing_key_with_empty_token_secret(self) -> None:
        """No token secret yet should leave the second half of the key empty."""
        assert signing_key("S1", "") == "S1&"
        assert signing_key("S1", None) == "S1&"

    def test_signing_key_encodes_secrets(self) -> None:
        assert signing_key("a&b", "c d") == "a%26b&c%20d"

    def test_is_hmac_over_base_string(self) -> None:
        """Signature should be base64(HMAC-SHA1(key, base string))."""
        url = "https://host/oauth/request_token"
        base = signature_base_string("GET", url, REQUEST_TOKEN_PARAMS)
        expected = base64.b64encode(
            hmac.new(b"S1&", base.encode(), hashlib.sha1).digest()
        ).decode()

        assert sign("GET", url, REQUEST_TOKEN_PARAMS, "S1", "") == expected

    def test_is_deterministic(self) -> None:
        url = "https://host/oauth/request_token"

        first = sign("GET", url, REQUEST_TOKEN_PARAMS, "S1", "RTS1")
        second = sign("GET", url, REQUEST_TOKEN_PARAMS, "S1", "RTS1")

        assert first == second

    @pytest.mark.parametrize("key", sorted(REQUEST_TOKEN_PARAMS))
    def test_changes_when_any_parameter_changes(self, key: str) -> None:
        """Changing one parameter value should change the signature."""
        url = "https://host/oauth/request_token"
        changed = {**REQUEST_TOKEN_PARAMS, key: REQUEST_TOKEN_PARAMS[key] + "x"}

        assert sign("GET", url, changed, "S1") != sign("GET", url, REQUEST_TOKEN_PARAMS, "S1")

    def test_changes_with_token_secret(self) -> None:
        url = "https://host/oauth/access_token"

        assert sign("GET", url, REQUEST_TOKEN_PARAMS, "S1", "a") != sign(
            "GET", url, REQUEST_TOKEN_PARAMS, "S1", "b"
        )

    def test_hmac_sha256(self) -> None:
        """HMAC-SHA256 should produce a 32-byte digest."""
        url = "https://host/oauth/request_token"
        signature = sign(
            "GET", url, REQUEST_TOKEN_PARAMS, "S1", signature_method="HMAC-SHA256"
        )

        assert len(base64.b64decode(signature)) == 32
        assert signature != sign("GET", url, REQUEST_TOKEN_PARAMS, "S1")

    def test_rejects_unknown_method(self) -> None:
        with pytest.raises(ValueError, match="Unsupported signature method"):
            sign("GET", "https://host/x", {}, "S1", signature_method="RSA-SHA1")

    def test_does_not_mutate_parameters(self) -> None:
        params = dict(REQUEST_TOKEN_PARAMS)

        sign("GET", "https://host/x?extra=1", params, "S1", "T1")

        assert params == REQUEST_TOKEN_PARAMS
