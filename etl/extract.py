"""
General Helpdesk Data Extraction Functions

This module provides the paginated extraction used for every helpdesk
resource (agents, groups, tickets). Each resource kind declares which
top-level response key carries its items.
"""

import time
from typing import NamedTuple, Optional

import requests

from utils.extract_utils import append_query_params


DEFAULT_PAGE_SIZE = 100
DEFAULT_PAGE_DELAY = 0.1
DEFAULT_RATE_LIMIT_DELAY = 10
DEFAULT_MAX_RATE_LIMIT_RETRIES = 10


class ResourceKind(NamedTuple):
    """A listing endpoint and the response key that holds its items."""
    name: str
    path: str
    response_key: str


AGENTS = ResourceKind(name="agents", path="agents", response_key="agents")
GROUPS = ResourceKind(name="groups", path="groups", response_key="groups")
TICKETS = ResourceKind(name="tickets", path="tickets", response_key="tickets")


def get_retry_delay(response, max_delay):
    """
    Seconds to wait after a 429: the Retry-After header clamped to
    [0, max_delay], or max_delay when the header is missing or unparsable.
    """
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return max(0, min(int(retry_after), max_delay))
        except ValueError:
            pass
    return max_delay


def extract_paginated_endpoint(
    url: str,
    resource: ResourceKind,
    headers: dict,
    page_size: int = DEFAULT_PAGE_SIZE,
    page_delay: float = DEFAULT_PAGE_DELAY,
    rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
    max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
    timeout: Optional[float] = None,
):
    """
    Fetches every page of a listing endpoint.

    Args:
        url: Listing URL, optionally already carrying query parameters
        resource: Resource kind, used to locate the items in each response
        headers: Authenticated request headers
        page_size: Items requested per page
        page_delay: Pause after each successful page
        rate_limit_delay: Pause after a 429, and the upper bound for Retry-After
        max_rate_limit_retries: 429 retries allowed for a single page
        timeout: Request timeout in seconds (None waits indefinitely)

    Returns:
        List of records in fetch order. On a non-429 failure the records
        fetched before the failure are returned.
    """
    all_records = []
    page = 1
    rate_limit_retries = 0

    print(f"\n--- Starting Paginated Export for {resource.name} ---")

    while True:
        page_url = append_query_params(url, [("per_page", page_size), ("page", page)])
        print(f"-> Fetching: {page_url}")

        try:
            response = requests.get(page_url, headers=headers, timeout=timeout)
            rate_limited = response.status_code == 429
            if not rate_limited:
                response.raise_for_status()
                data = response.json()

        except (requests.exceptions.RequestException, ValueError) as e:
            print(f"❌ Error fetching {resource.name} page {page}: {e}")
            print(f"   Keeping {len(all_records):,} {resource.name} fetched so far.")
            break

        # Handle Rate Limits (429)
        if rate_limited:
            if rate_limit_retries >= max_rate_limit_retries:
                print(f"❌ Rate limit retries exhausted for {resource.name} page {page}. "
                      f"Keeping {len(all_records):,} records fetched so far.")
                break
            rate_limit_retries += 1
            retry_after = get_retry_delay(response, rate_limit_delay)
            print(f"!!! Rate limit hit. Waiting for {retry_after} seconds "
                  f"(retry {rate_limit_retries}/{max_rate_limit_retries})...")
            time.sleep(retry_after)
            continue  # Retry the same page

        rate_limit_retries = 0

        records = data.get(resource.response_key) if isinstance(data, dict) else None
        if not isinstance(records, list):
            print(f"   No '{resource.response_key}' array in response. No more data available.")
            break

        if not records:
            break

        all_records.extend(records)
        print(f"   Fetched {len(records)} records. Total records: {len(all_records):,}")

        page += 1
        time.sleep(page_delay)  # Be kind to the API

    print(f"-> Total {resource.name} fetched: {len(all_records):,}")
    return all_records


def extract_resource(source, resource, url=None):
    """
    Extracts one resource kind using the source configuration.

    Args:
        source: SourceConfig with the API root, credentials and pagination settings
        resource: ResourceKind to extract
        url: Optional listing URL (e.g. tickets with filters); defaults to the resource path

    Returns:
        List of raw records
    """
    if url is None:
        url = f"{source.base_url}/{resource.path}"

    return extract_paginated_endpoint(
        url,
        resource,
        headers=source.headers,
        page_size=source.page_size,
        page_delay=source.page_delay,
        rate_limit_delay=source.rate_limit_delay,
        max_rate_limit_retries=source.max_rate_limit_retries,
        timeout=source.timeout,
    )
