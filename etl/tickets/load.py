"""
Tickets Load

Delivers enriched tickets to the configured sink.
"""

from etl.load import load_to_file, load_to_ingestion_api
from utils.auth_utils import get_access_token
from utils.config_utils import FileExportConfig, RemoteIngestionConfig


def deliver_tickets(records, sink):
    """
    Dispatch enriched tickets to the file or remote ingestion sink.

    The remote sink acquires its token first; a TokenAcquisitionError stops
    the run before any batch is sent.
    """
    if isinstance(sink, FileExportConfig):
        print(f"\n{'='*60}")
        print(f"Writing tickets to {sink.output_path}")
        print(f"{'='*60}")
        return load_to_file(records, sink.output_path)

    if isinstance(sink, RemoteIngestionConfig):
        print(f"\n{'='*60}")
        print("Sending tickets to Logs Ingestion API")
        print(f"{'='*60}")
        token = get_access_token(sink)
        return load_to_ingestion_api(records, sink, token)

    raise TypeError(f"Unsupported sink configuration: {type(sink).__name__}")
