"""Credential checks for the administrative book routes."""

import hmac
from typing import Protocol


class Authenticator(Protocol):
    """Decides whether a caller-provided secret grants admin access."""

    def check(self, provided_secret: str | None) -> bool: ...


class StaticSecretAuthenticator:
    """Accepts exactly one shared secret.

    With no secret configured every request is rejected.
    """

    def __init__(self, secret: str | None) -> None:
        self._secret = secret or None

    def check(self, provided_secret: str | None) -> bool:
        if self._secret is None or provided_secret is None:
            return False
        return hmac.compare_digest(
            provided_secret.encode("utf-8"), self._secret.encode("utf-8")
        )
