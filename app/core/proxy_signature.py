"""Shopify App Proxy and webhook signature verification.

Every signed boundary in the service goes through this module so there is a
single canonicalization. The App Proxy signs its own query string:

    message = "name1=v1name2=v2,v3..."   (names sorted, "signature" excluded)
    signature = hex(HMAC-SHA256(secret, message))

Pairs are concatenated without any delimiter; changing that breaks
verification against Shopify.
"""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlsplit

from app.core.enums import VerificationFailure

SIGNATURE_PARAM = "signature"
LOGGED_IN_CUSTOMER_PARAM = "logged_in_customer_id"


@dataclass(frozen=True)
class ProxyVerification:
    ok: bool
    reason: Optional[VerificationFailure] = None
    shop: Optional[str] = None
    logged_in_customer_id: Optional[str] = None


def canonical_message(params: Iterable[tuple[str, str]]) -> str:
    grouped: dict[str, list[str]] = {}
    for name, value in params:
        if name == SIGNATURE_PARAM:
            continue
        grouped.setdefault(name, []).append(value)

    # Byte order of names, not locale collation.
    names = sorted(grouped, key=lambda name: name.encode("utf-8"))
    return "".join(f"{name}={','.join(grouped[name])}" for name in names)


def compute_signature(params: Iterable[tuple[str, str]], secret: str) -> str:
    message = canonical_message(params)
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def _constant_time_equal(a: str, b: str) -> bool:
    ba = a.encode("utf-8")
    bb = b.encode("utf-8")
    if len(ba) != len(bb):
        return False
    return hmac.compare_digest(ba, bb)


def _query_params(url: str) -> list[tuple[str, str]]:
    query = urlsplit(url).query
    return parse_qsl(query, keep_blank_values=True, strict_parsing=False)


def extract_logged_in_customer_id(url: str) -> Optional[str]:
    """Customer id asserted by the proxy, if any. Not a verification step."""
    try:
        params = _query_params(url)
    except (ValueError, TypeError, UnicodeError):
        return None
    for name, value in params:
        if name == LOGGED_IN_CUSTOMER_PARAM and value:
            return value
    return None


def verify_proxy_request(url: str, secret: Optional[str]) -> ProxyVerification:
    """Verify a signed App Proxy request URL.

    Pure and non-raising: any parsing problem is reported as
    ``invalid_signature`` so callers can always answer with a well-formed
    error body.
    """
    if not secret:
        return ProxyVerification(ok=False, reason=VerificationFailure.MISSING_SECRET)

    try:
        params = _query_params(url)
    except (ValueError, TypeError, UnicodeError):
        return ProxyVerification(
            ok=False, reason=VerificationFailure.INVALID_SIGNATURE
        )

    provided = next(
        (value for name, value in params if name == SIGNATURE_PARAM), None
    )
    if not provided:
        return ProxyVerification(
            ok=False, reason=VerificationFailure.MISSING_SIGNATURE
        )

    try:
        expected = compute_signature(params, secret)
        valid = _constant_time_equal(expected, provided)
    except (ValueError, TypeError, UnicodeError):
        valid = False

    if not valid:
        return ProxyVerification(
            ok=False, reason=VerificationFailure.INVALID_SIGNATURE
        )

    values = dict(params)
    return ProxyVerification(
        ok=True,
        shop=values.get("shop") or None,
        logged_in_customer_id=values.get(LOGGED_IN_CUSTOMER_PARAM) or None,
    )


def compute_webhook_hmac(raw_body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_hmac(
    raw_body: bytes, hmac_header: Optional[str], secret: Optional[str]
) -> bool:
    if not secret or not hmac_header:
        return False
    try:
        expected = compute_webhook_hmac(raw_body, secret)
        return _constant_time_equal(expected, hmac_header)
    except (ValueError, TypeError, UnicodeError):
        return False
