"""
Authentication for the put.io SDK.

put.io authorizes every call with an ``oauth_token`` query parameter. This
module holds that token for the clients and implements the one-shot OAuth
authorization-code exchange used to obtain it.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

import requests

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .exceptions import AuthenticationError, ConfigurationError, DecodeError, NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)

TOKEN_PARAM = "oauth_token"


class AuthManager:
    """
    Holds the access token and renders it as request parameters.

    The token is fixed for the lifetime of the manager.
    """

    def __init__(self, token: str):
        if not token:
            raise ConfigurationError("Access token is required for authentication", config_key="token")
        self._token = token

    @property
    def token(self) -> str:
        return self._token

    def get_auth_params(self) -> Dict[str, str]:
        """Query parameters that authorize a request."""
        return {TOKEN_PARAM: self._token}

    def sign_params(self, params: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Return ``params`` with the token appended after the caller's parameters.

        A caller-supplied ``oauth_token`` is replaced rather than duplicated.
        """
        signed = {key: value for key, value in (params or {}).items() if key != TOKEN_PARAM}
        signed.update(self.get_auth_params())
        return signed

    def __repr__(self):
        return "AuthManager(token=***)"


def build_authorization_url(client_id: str, redirect_uri: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """URL of the consent page a user visits to grant the app an authorization code."""
    query = urlencode({
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
    })
    return f"{base_url.rstrip('/')}/oauth2/authenticate?{query}"


def exchange_code(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Exchange an authorization code for an access token.

    Args:
        client_id: Application id
        client_secret: Application secret
        redirect_uri: Redirect URI registered for the application
        code: Authorization code received on the redirect
        base_url: API root
        timeout: Request timeout in seconds
        session: Optional session to issue the request with

    Returns:
        The access token string
    """
    params = {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri,
        "code": code,
    }
    http = session or requests.Session()
    url = f"{base_url.rstrip('/')}/oauth2/access_token"

    logger.debug("Exchanging authorization code for client %s", client_id)
    try:
        response = http.request("GET", url, params=params, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise RequestTimeoutError(f"OAuth token request timed out: {e}", timeout_seconds=timeout)
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"Error calling OAuth service: {e}")
    finally:
        if session is None:
            http.close()

    try:
        payload = response.json()
    except ValueError:
        raise DecodeError(
            "OAuth response is not valid JSON",
            raw_body=response.text,
            status_code=response.status_code,
        )

    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise AuthenticationError(
            "OAuth response did not contain an access token",
            details={"response": payload, "status_code": response.status_code},
        )
    return token
