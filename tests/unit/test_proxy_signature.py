import hashlib
import hmac
from urllib.parse import urlencode

import pytest

from app.core.enums import VerificationFailure
from app.core.proxy_signature import (
    canonical_message,
    compute_signature,
    compute_webhook_hmac,
    extract_logged_in_customer_id,
    verify_proxy_request,
    verify_webhook_hmac,
)

SECRET = "hush"


def _signed_url(params: list[tuple[str, str]], secret: str = SECRET) -> str:
    signature = compute_signature(params, secret)
    return "https://api.test/v1/proxy/payouts/summary?" + urlencode(
        params + [("signature", signature)]
    )


@pytest.mark.unit
class TestCanonicalMessage:
    def test_sorts_names_and_concatenates_without_separator(self) -> None:
        params = [("shop", "s.myshopify.com"), ("logged_in_customer_id", "42")]

        assert canonical_message(params) == "logged_in_customer_id=42shop=s.myshopify.com"

    def test_excludes_signature(self) -> None:
        params = [("a", "1"), ("signature", "deadbeef")]

        assert canonical_message(params) == "a=1"

    def test_repeated_names_joined_with_comma(self) -> None:
        params = [("ids", "1"), ("b", "x"), ("ids", "2")]

        assert canonical_message(params) == "b=xids=1,2"

    def test_byte_order_puts_uppercase_first(self) -> None:
        params = [("b", "1"), ("B", "2"), ("_", "3")]

        assert canonical_message(params) == "B=2_=3b=1"

    def test_known_digest(self) -> None:
        params = [("shop", "s"), ("timestamp", "1")]
        expected = hmac.new(b"hush", b"shop=stimestamp=1", hashlib.sha256).hexdigest()

        assert compute_signature(params, SECRET) == expected


@pytest.mark.unit
class TestVerifyProxyRequest:
    def test_valid_request_exposes_shop_and_customer(self) -> None:
        url = _signed_url([("shop", "s.myshopify.com"), ("logged_in_customer_id", "42")])

        result = verify_proxy_request(url, SECRET)

        assert result.ok is True
        assert result.reason is None
        assert result.shop == "s.myshopify.com"
        assert result.logged_in_customer_id == "42"

    def test_verification_is_repeatable(self) -> None:
        url = _signed_url([("shop", "s"), ("timestamp", "1700000000")])

        first = verify_proxy_request(url, SECRET)
        second = verify_proxy_request(url, SECRET)

        assert first == second
        assert first.ok is True

    def test_parameter_order_does_not_matter(self) -> None:
        params = [("shop", "s"), ("timestamp", "1"), ("path_prefix", "/apps/mf")]
        signature = compute_signature(params, SECRET)
        reordered = urlencode(
            [("signature", signature)] + list(reversed(params))
        )

        result = verify_proxy_request(f"https://api.test/x?{reordered}", SECRET)

        assert result.ok is True

    def test_tampered_value_is_rejected(self) -> None:
        url = _signed_url([("shop", "s"), ("logged_in_customer_id", "42")])
        tampered = url.replace("logged_in_customer_id=42", "logged_in_customer_id=43")

        result = verify_proxy_request(tampered, SECRET)

        assert result.ok is False
        assert result.reason == VerificationFailure.INVALID_SIGNATURE

    def test_added_parameter_is_rejected(self) -> None:
        url = _signed_url([("shop", "s")]) + "&extra=1"

        result = verify_proxy_request(url, SECRET)

        assert result.reason == VerificationFailure.INVALID_SIGNATURE

    def test_wrong_secret_is_rejected(self) -> None:
        url = _signed_url([("shop", "s")], secret="other")

        assert verify_proxy_request(url, SECRET).ok is False

    def test_missing_secret(self) -> None:
        url = _signed_url([("shop", "s")])

        for secret in (None, ""):
            result = verify_proxy_request(url, secret)
            assert result.ok is False
            assert result.reason == VerificationFailure.MISSING_SECRET

    def test_missing_signature(self) -> None:
        result = verify_proxy_request("https://api.test/x?shop=s", SECRET)

        assert result.reason == VerificationFailure.MISSING_SIGNATURE

    def test_empty_signature_counts_as_missing(self) -> None:
        result = verify_proxy_request("https://api.test/x?shop=s&signature=", SECRET)

        assert result.reason == VerificationFailure.MISSING_SIGNATURE

    def test_wrong_length_signature_is_invalid(self) -> None:
        result = verify_proxy_request("https://api.test/x?shop=s&signature=abc", SECRET)

        assert result.reason == VerificationFailure.INVALID_SIGNATURE

    def test_malformed_input_never_raises(self) -> None:
        for url in ("", "not a url", "http://[::1/x?signature=zz", "?%%%signature=%ZZ"):
            result = verify_proxy_request(url, SECRET)
            assert result.ok is False

    def test_blank_values_are_signed(self) -> None:
        url = _signed_url([("shop", "s"), ("logged_in_customer_id", "")])

        result = verify_proxy_request(url, SECRET)

        assert result.ok is True
        assert result.logged_in_customer_id is None


@pytest.mark.unit
class TestExtractLoggedInCustomerId:
    def test_present(self) -> None:
        assert extract_logged_in_customer_id("https://a/x?logged_in_customer_id=9") == "9"

    def test_absent_or_empty(self) -> None:
        assert extract_logged_in_customer_id("https://a/x?shop=s") is None
        assert extract_logged_in_customer_id("https://a/x?logged_in_customer_id=") is None


@pytest.mark.unit
class TestWebhookHmac:
    def test_valid_header(self) -> None:
        body = b'{"id": 1}'
        header = compute_webhook_hmac(body, SECRET)

        assert verify_webhook_hmac(body, header, SECRET) is True

    def test_modified_body_is_rejected(self) -> None:
        header = compute_webhook_hmac(b'{"id": 1}', SECRET)

        assert verify_webhook_hmac(b'{"id": 2}', header, SECRET) is False

    def test_missing_header_or_secret(self) -> None:
        body = b"{}"
        header = compute_webhook_hmac(body, SECRET)

        assert verify_webhook_hmac(body, None, SECRET) is False
        assert verify_webhook_hmac(body, header, None) is False


@pytest.mark.unit
class TestSignatureReplay:
    def test_signature_reused_with_other_parameters_is_rejected(self) -> None:
        original = [("shop", "s"), ("logged_in_customer_id", "42")]
        signature = compute_signature(original, SECRET)
        replayed = urlencode(
            [("shop", "s"), ("logged_in_customer_id", "43"), ("signature", signature)]
        )

        result = verify_proxy_request(f"https://api.test/x?{replayed}", SECRET)

        assert result.reason == VerificationFailure.INVALID_SIGNATURE

    def test_values_cannot_be_moved_between_names(self) -> None:
        original = [("a", "1"), ("b", "2")]
        signature = compute_signature(original, SECRET)
        swapped = urlencode([("a", "2"), ("b", "1"), ("signature", signature)])

        assert verify_proxy_request(f"https://api.test/x?{swapped}", SECRET).ok is False
