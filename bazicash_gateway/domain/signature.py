"""App Proxy signature verification.

Shopify signs every App Proxy request with the app's shared secret. The
signature covers all query parameters except ``signature`` itself:

    sorted("key=value" for each param, multi values joined by ",")
    -> concatenated without separator -> HMAC-SHA256 -> hex digest

Verification fails closed: any malformed input is reported as invalid.
"""

import hashlib
import hmac
import time
from typing import Dict, Iterable, List, Optional, Tuple

SIGNATURE_PARAM = "signature"
TIMESTAMP_PARAM = "timestamp"


def _group_params(params: Iterable[Tuple[str, str]]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for key, value in params:
        grouped.setdefault(key, []).append(value)
    return grouped


def compute_signature(params: Iterable[Tuple[str, str]], secret: str) -> str:
    """Compute the expected App Proxy signature for a parameter set"""
    grouped = _group_params(params)
    grouped.pop(SIGNATURE_PARAM, None)
    message = "".join(
        sorted(f"{key}={','.join(values)}" for key, values in grouped.items())
    )
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(
    params: Iterable[Tuple[str, str]],
    secret: str,
    tolerance_seconds: Optional[int] = 90,
    now: Optional[float] = None,
) -> bool:
    """
    Return True only when the request carries a valid, fresh signature.

    Args:
        params: Inbound query parameters as (key, value) pairs
        secret: Shared app secret; empty secret never validates
        tolerance_seconds: Allowed clock skew for ``timestamp``; None disables the check
        now: Current unix time (for tests)
    """
    if not secret:
        return False

    items = list(params)
    grouped = _group_params(items)
    provided = grouped.get(SIGNATURE_PARAM)
    if not provided or len(provided) != 1 or not provided[0]:
        return False

    if tolerance_seconds is not None:
        try:
            timestamp = int(grouped[TIMESTAMP_PARAM][0])
        except (KeyError, IndexError, ValueError):
            return False
        current = int(now if now is not None else time.time())
        if abs(current - timestamp) > tolerance_seconds:
            return False

    expected = compute_signature(items, secret)
    try:
        return hmac.compare_digest(expected, provided[0])
    except TypeError:
        # non-ASCII signature values
        return False
