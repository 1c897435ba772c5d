"""
Load Utilities

Helpers shared by the file and remote ingestion sinks.
"""

import json


def chunk_records(records, batch_size):
    """Yields consecutive, order-preserving slices of at most batch_size records."""
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    for start_idx in range(0, len(records), batch_size):
        yield records[start_idx:start_idx + batch_size]


def build_ingestion_url(dce_endpoint, dcr_immutable_id, stream_name, api_version):
    """Logs Ingestion API URL for one Data Collection Rule stream."""
    return (
        f"{dce_endpoint.rstrip('/')}/dataCollectionRules/{dcr_immutable_id}"
        f"/streams/{stream_name}?api-version={api_version}"
    )


def collect_columns(records):
    """
    Ordered union of the record keys: the first record's keys first, then any
    key seen later in order of first appearance.
    """
    columns = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def to_cell(value):
    """Lists and dicts are stored as JSON text in a CSV cell."""
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def is_success(response):
    return 200 <= response.status_code < 300
