"""Credential verification used by the login flow."""
from __future__ import annotations

import hmac
from typing import Protocol

from interviews.models import Interview


class CredentialVerifier(Protocol):
    def verify(self, interview: Interview, supplied: str) -> bool: ...


class PlainTextVerifier:
    """Compare the supplied password with the stored one verbatim.

    Stored passwords are shared secrets handed out by the administrator, so
    the comparison is exact (case and whitespace sensitive).
    """

    def verify(self, interview: Interview, supplied: str) -> bool:
        # Lone surrogates can arrive through JSON escapes; they just fail to match.
        return hmac.compare_digest(
            interview.password.encode("utf-8", "surrogatepass"),
            supplied.encode("utf-8", "surrogatepass"),
        )


__all__ = ["CredentialVerifier", "PlainTextVerifier"]
