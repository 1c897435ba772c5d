"""
Tickets Extraction

Extracts tickets (with the embedded requester) updated within the lookback window.
"""

from etl.extract import TICKETS, extract_resource
from utils.extract_utils import build_tickets_url, calculate_updated_since


def extract_tickets(source, now=None):
    """
    Fetch every ticket for the configured lookback window.

    Args:
        source: SourceConfig
        now: Reference time for the lookback window (defaults to current UTC time)

    Returns:
        List of raw ticket records
    """
    updated_since = calculate_updated_since(source.lookback_minutes, now=now)
    if updated_since:
        print(f"-> Tickets updated since {updated_since} (last {source.lookback_minutes} minutes)")
    else:
        print("\n!!! WARNING: Lookback is 0. This will pull ALL historical tickets!")

    url = build_tickets_url(source.base_url, source.lookback_minutes, now=now)
    return extract_resource(source, TICKETS, url=url)
