import base64
import urllib.parse
from datetime import datetime, timedelta, timezone


def build_auth_headers(api_key):
    """Builds the Basic auth headers for the helpdesk API (api key with an 'X' password)."""
    encoded_auth = base64.b64encode(f"{api_key}:X".encode()).decode()
    return {
        "Authorization": f"Basic {encoded_auth}",
        "Content-Type": "application/json",
    }


def build_base_url(domain):
    """Returns the API root for a helpdesk domain, with or without a scheme."""
    domain = domain.strip().rstrip("/")
    if "://" not in domain:
        domain = f"https://{domain}"
    return f"{domain}/api/v2"


def calculate_updated_since(lookback_minutes, now=None):
    """
    Calculates the 'updated_since' filter value for a lookback window.

    Returns None when lookback_minutes is 0 (or negative), which means the
    whole ticket history is requested.
    """
    if not lookback_minutes or lookback_minutes <= 0:
        return None

    if now is None:
        now = datetime.now(timezone.utc)

    start = now - timedelta(minutes=lookback_minutes)
    return start.strftime("%Y-%m-%dT%H:%M:%SZ")


def append_query_params(url, params):
    """Appends already-encoded query parameters to a URL that may carry a query string."""
    if not params:
        return url
    query = "&".join(f"{key}={value}" for key, value in params)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def build_tickets_url(base_url, lookback_minutes, now=None):
    """
    Builds the ticket listing URL with the requester sideload and the
    optional 'updated_since' filter (URL-escaped, ':' becomes '%3A').
    """
    params = [("include", "requester")]

    updated_since = calculate_updated_since(lookback_minutes, now=now)
    if updated_since:
        params.append(("updated_since", urllib.parse.quote(updated_since, safe="")))

    return append_query_params(f"{base_url}/tickets", params)
