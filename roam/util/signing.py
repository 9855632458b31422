"""HMAC signing helpers shared by remote-login tokens and roaming cookies.

Payloads are signed over their canonical JSON form (sorted keys, compact
separators) so that re-serializing a decoded payload reproduces the exact
bytes that were signed.
"""

import hashlib
import hmac
import json
from typing import Any


def canonical_json(payload: dict[str, Any]) -> str:
    """Serialize a payload deterministically."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def sign(payload: dict[str, Any], secret: str) -> str:
    """Compute the hex HMAC-SHA256 signature of a payload.

    Args:
        payload: JSON-compatible mapping
        secret: Signing secret

    Returns:
        Hex digest
    """
    return hmac.new(
        secret.encode(), canonical_json(payload).encode(), hashlib.sha256
    ).hexdigest()


def verify(payload: dict[str, Any], signature: str, secret: str) -> bool:
    """Check a signature in constant time.

    Compared as bytes: ``compare_digest`` rejects non-ASCII ``str`` input.
    """
    return constant_time_equals(sign(payload, secret), signature)


def constant_time_equals(expected: str, given: str) -> bool:
    """Compare a computed value with an untrusted one in constant time."""
    return hmac.compare_digest(expected.encode(), given.encode("utf-8", "surrogatepass"))
