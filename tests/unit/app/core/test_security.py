"""Tests for the admin secret authenticator."""

import pytest

from src.lending.core.security import Authenticator, StaticSecretAuthenticator


class TestStaticSecretAuthenticator:
    """Test shared-secret checks."""

    def test_matching_secret_is_accepted(self):
        auth = StaticSecretAuthenticator("s3cret")

        assert auth.check("s3cret") is True

    @pytest.mark.parametrize("provided", ["wrong", "s3cre", "s3cret ", "S3CRET", ""])
    def test_other_secrets_are_rejected(self, provided: str):
        auth = StaticSecretAuthenticator("s3cret")

        assert auth.check(provided) is False

    def test_missing_header_is_rejected(self):
        auth = StaticSecretAuthenticator("s3cret")

        assert auth.check(None) is False

    @pytest.mark.parametrize("configured", [None, ""])
    def test_unconfigured_secret_rejects_everything(self, configured):
        auth = StaticSecretAuthenticator(configured)

        assert auth.check("") is False
        assert auth.check("anything") is False
        assert auth.check(None) is False

    def test_non_ascii_secret(self):
        auth = StaticSecretAuthenticator("pässwörd")

        assert auth.check("pässwörd") is True
        assert auth.check("passwort") is False

    def test_satisfies_authenticator_protocol(self):
        auth: Authenticator = StaticSecretAuthenticator("s3cret")

        assert callable(auth.check)
