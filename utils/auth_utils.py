"""
Authentication Utilities

OAuth2 client-credentials token exchange for the Logs Ingestion API.
"""

import requests


class TokenAcquisitionError(RuntimeError):
    """Raised when no access token could be obtained; ingestion cannot proceed."""


def build_token_url(authority, tenant_id):
    return f"{authority.rstrip('/')}/{tenant_id}/oauth2/v2.0/token"


def get_access_token(remote):
    """
    Exchange client credentials for a bearer token.

    Args:
        remote: RemoteIngestionConfig with tenant, client id/secret, authority and scope

    Returns:
        The access token string

    Raises:
        TokenAcquisitionError: On a transport error, a non-success response,
            or a response without an access_token
    """
    url = build_token_url(remote.authority, remote.tenant_id)
    body = {
        "grant_type": "client_credentials",
        "client_id": remote.client_id,
        "client_secret": remote.client_secret,
        "scope": remote.scope,
    }

    print("\n--- Acquiring Access Token ---")

    try:
        response = requests.post(url, data=body, timeout=remote.timeout)
        response.raise_for_status()
        token = response.json().get("access_token")
    except requests.exceptions.HTTPError as e:
        raise TokenAcquisitionError(f"Token request failed: {e} - {e.response.text}") from e
    except (requests.exceptions.RequestException, ValueError) as e:
        raise TokenAcquisitionError(f"Token request failed: {e}") from e

    if not token:
        raise TokenAcquisitionError("Token response did not contain an access_token")

    print("✅ Access token acquired")
    return token
