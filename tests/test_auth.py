from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from putio_sdk.auth import AuthManager, build_authorization_url, exchange_code
from putio_sdk.exceptions import AuthenticationError, ConfigurationError, DecodeError, NetworkError

from conftest import FakeSession, path_of, query_of


def test_auth_manager_requires_token():
    with pytest.raises(ConfigurationError):
        AuthManager("")


def test_sign_params_appends_token_last():
    auth = AuthManager("abc")

    signed = auth.sign_params({"parent_id": "0"})

    assert list(signed.items()) == [("parent_id", "0"), ("oauth_token", "abc")]


def test_sign_params_replaces_caller_token():
    signed = AuthManager("abc").sign_params({"oauth_token": "forged", "q": "x"})

    assert signed == {"q": "x", "oauth_token": "abc"}


def test_repr_hides_token():
    assert "abc" not in repr(AuthManager("abc"))


def test_build_authorization_url():
    url = build_authorization_url("1234", "https://app.example/callback")

    parts = urlsplit(url)
    assert parts.netloc == "api.put.io"
    assert parts.path == "/v2/oauth2/authenticate"
    assert parse_qs(parts.query) == {
        "client_id": ["1234"],
        "response_type": ["code"],
        "redirect_uri": ["https://app.example/callback"],
    }


def test_exchange_code_sends_credentials_and_returns_token():
    session = FakeSession().reply({"access_token": "ABV9KDHN"})

    token = exchange_code("1234", "s3cret", "https://app.example/cb", "CODE", session=session)

    assert token == "ABV9KDHN"
    assert session.last.method == "GET"
    assert path_of(session.last) == "/v2/oauth2/access_token"
    assert dict(query_of(session.last)) == {
        "client_id": "1234",
        "client_secret": "s3cret",
        "grant_type": "authorization_code",
        "redirect_uri": "https://app.example/cb",
        "code": "CODE",
    }
    assert not session.closed


def test_exchange_code_without_token_is_authentication_error():
    session = FakeSession().reply({"error": "invalid_grant"}, status=400)

    with pytest.raises(AuthenticationError) as exc_info:
        exchange_code("1234", "s3cret", "https://app.example/cb", "BAD", session=session)

    assert exc_info.value.details["status_code"] == 400


def test_exchange_code_non_json_is_decode_error():
    session = FakeSession().reply("Service Unavailable", status=503)

    with pytest.raises(DecodeError) as exc_info:
        exchange_code("1234", "s3cret", "https://app.example/cb", "CODE", session=session)

    assert exc_info.value.raw_body == "Service Unavailable"


def test_exchange_code_transport_failure():
    session = FakeSession().fail_with(requests.exceptions.ConnectionError("refused"))

    with pytest.raises(NetworkError):
        exchange_code("1234", "s3cret", "https://app.example/cb", "CODE", session=session)
