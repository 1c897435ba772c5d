"""
Load Functions

Functions for delivering enriched records to a local file (JSON or CSV) or
to the Logs Ingestion API in fixed-size batches.
"""

import json
import os
from dataclasses import dataclass
from typing import Optional

import pandas as pd
import requests

from utils.load_utils import build_ingestion_url, chunk_records, collect_columns, is_success, to_cell


@dataclass
class DeliveryReport:
    mode: str
    records: int = 0
    records_sent: int = 0
    batches_sent: int = 0
    batches_failed: int = 0
    output_path: Optional[str] = None

    @property
    def ok(self):
        return self.batches_failed == 0


def write_json(records, output_path):
    """Write the whole record set as one JSON array, overwriting any existing file."""
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(records, f, ensure_ascii=False, indent=2)


def write_csv(records, output_path):
    """
    Write the record set as CSV with a header row.

    The header is the ordered union of all record keys so records with
    differing fields still line up; missing cells are left blank.
    """
    columns = collect_columns(records)
    rows = [[to_cell(record.get(col)) for col in columns] for record in records]
    df = pd.DataFrame(rows, columns=columns, dtype=object)
    df.to_csv(output_path, index=False, encoding='utf-8')


def load_to_file(records, output_path):
    """
    Write records to output_path. A '.csv' extension (any case) selects CSV,
    anything else JSON. Write errors propagate.
    """
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    if output_path.lower().endswith(".csv"):
        write_csv(records, output_path)
        file_format = "CSV"
    else:
        write_json(records, output_path)
        file_format = "JSON"

    print(f"\n✅ Success! {len(records):,} records saved to {output_path} ({file_format})")
    return DeliveryReport(mode="file", records=len(records), records_sent=len(records), output_path=output_path)


def post_batch(url, batch, token, timeout=None):
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    body = json.dumps(batch, ensure_ascii=False, separators=(",", ":"))
    return requests.post(url, data=body.encode('utf-8'), headers=headers, timeout=timeout)


def load_to_ingestion_api(records, remote, token):
    """
    Send records to the Logs Ingestion API in batches of remote.batch_size.

    A failed batch is reported and skipped; the remaining batches are still sent.

    Args:
        records: Enriched records, in delivery order
        remote: RemoteIngestionConfig
        token: Bearer token

    Returns:
        DeliveryReport with sent/failed batch counts
    """
    url = build_ingestion_url(remote.dce_endpoint, remote.dcr_immutable_id, remote.stream_name, remote.api_version)
    report = DeliveryReport(mode="remote", records=len(records))
    total_batches = (len(records) + remote.batch_size - 1) // remote.batch_size

    print(f"\n--- Sending {len(records):,} records to stream {remote.stream_name} ({total_batches} batches) ---")

    for batch_number, batch in enumerate(chunk_records(records, remote.batch_size), start=1):
        try:
            response = post_batch(url, batch, token, timeout=remote.timeout)
        except requests.exceptions.RequestException as e:
            print(f"❌ Batch {batch_number}/{total_batches} ({len(batch)} records) failed: {e}")
            report.batches_failed += 1
            continue

        if is_success(response):
            report.batches_sent += 1
            report.records_sent += len(batch)
            print(f"   Batch {batch_number}/{total_batches} sent ({len(batch)} records)")
        else:
            report.batches_failed += 1
            print(f"❌ Batch {batch_number}/{total_batches} ({len(batch)} records) failed "
                  f"with status {response.status_code}: {response.text}")

    if report.ok:
        print(f"\n✅ Successfully sent {report.records_sent:,} records in {report.batches_sent} batches")
    else:
        print(f"\n⚠️  Sent {report.records_sent:,} of {report.records:,} records; "
              f"{report.batches_failed} of {total_batches} batches failed")
    return report
