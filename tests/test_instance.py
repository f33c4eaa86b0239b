"""Tests for instance URL resolution."""

import logging
from unittest.mock import MagicMock

import pytest
from conftest import make_id_token

from salesforce_tools.errors import ConfigurationError, MalformedTokenError
from salesforce_tools.instance import decode_id_token, resolve_instance_url


class TestExplicitUrl:
    def test_explicit_url_wins_over_token(self):
        token = make_id_token({"profile": "https://other.my.salesforce.com/005"})
        assert resolve_instance_url("https://acme.my.salesforce.com", token) == (
            "https://acme.my.salesforce.com"
        )

    def test_explicit_url_returned_unchanged(self):
        assert resolve_instance_url("https://acme.my.salesforce.com/") == (
            "https://acme.my.salesforce.com/"
        )

    def test_token_not_decoded_when_url_given(self):
        log = MagicMock(spec=logging.Logger)
        assert resolve_instance_url("https://x.com", "garbage", log=log) == "https://x.com"
        log.error.assert_not_called()


class TestTokenClaims:
    def test_profile_origin(self):
        token = make_id_token(
            {"profile": "https://acme.my.salesforce.com/005xx000001Sv6AAAS", "sub": "x"}
        )
        assert resolve_instance_url(None, token) == "https://acme.my.salesforce.com"

    def test_sub_origin(self):
        token = make_id_token({"sub": "https://acme.my.salesforce.com/id/00D/005"})
        assert resolve_instance_url(None, token) == "https://acme.my.salesforce.com"

    def test_profile_takes_precedence_over_sub(self):
        token = make_id_token(
            {
                "profile": "https://profile.my.salesforce.com/005",
                "sub": "https://sub.my.salesforce.com/id/00D/005",
            }
        )
        assert resolve_instance_url("", token) == "https://profile.my.salesforce.com"

    def test_login_host_in_sub_is_ignored(self):
        token = make_id_token({"sub": "https://login.salesforce.com/id/00D/005"})
        with pytest.raises(ConfigurationError):
            resolve_instance_url(None, token)

    def test_login_host_in_profile_is_used(self):
        token = make_id_token({"profile": "https://login.salesforce.com/005"})
        assert resolve_instance_url(None, token) == "https://login.salesforce.com"

    def test_non_https_claim_does_not_resolve(self):
        token = make_id_token({"profile": "http://acme.my.salesforce.com/005"})
        with pytest.raises(ConfigurationError):
            resolve_instance_url(None, token)

    def test_no_claims(self):
        token = make_id_token({"aud": "client"})
        with pytest.raises(ConfigurationError, match="instance URL is required"):
            resolve_instance_url(None, token)


class TestMalformedToken:
    @pytest.mark.parametrize(
        "token",
        [
            "no-dots-at-all",
            "header.!!!not-base64!!!.sig",
            "header." + "bm90IGpzb24" + ".sig",  # "not json"
            make_id_token(["a", "list"]),
        ],
    )
    def test_malformed_token_logs_once_and_raises_configuration_error(self, token):
        log = MagicMock(spec=logging.Logger)

        with pytest.raises(ConfigurationError):
            resolve_instance_url(None, token, log=log)

        log.error.assert_called_once()

    def test_non_string_claim_is_malformed(self):
        log = MagicMock(spec=logging.Logger)
        token = make_id_token({"profile": 42})

        with pytest.raises(ConfigurationError):
            resolve_instance_url(None, token, log=log)

        log.error.assert_called_once()

    def test_decode_raises_malformed_token_error(self):
        with pytest.raises(MalformedTokenError):
            decode_id_token("only.one")

    def test_decode_handles_missing_padding_and_url_alphabet(self):
        claims = {"profile": "https://acme.my.salesforce.com/005", "name": "Ünïcødé ~~~"}
        assert decode_id_token(make_id_token(claims)) == claims


class TestNothingConfigured:
    @pytest.mark.parametrize("url,token", [(None, None), ("", ""), (None, "")])
    def test_raises_configuration_error(self, url, token):
        with pytest.raises(ConfigurationError) as exc:
            resolve_instance_url(url, token)
        assert str(exc.value) == "Salesforce instance URL is required but not provided"
