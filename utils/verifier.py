"""
Category password verifier.

The stored value is a base64 encoding of the plaintext. It hides gated
categories from casual visitors and is trivially reversible, so it must not
be treated as access control.
"""
import base64
import hmac
from typing import Optional


def encode_verifier(plaintext: str) -> str:
    return base64.b64encode((plaintext or "").encode("utf-8")).decode("ascii")


def verifier_matches(stored: Optional[str], plaintext: Optional[str]) -> bool:
    if not stored or not plaintext:
        return False
    return hmac.compare_digest(stored.encode("ascii", "ignore"), encode_verifier(plaintext).encode("ascii"))
