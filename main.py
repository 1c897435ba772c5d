"""
Helpdesk Ticket Pipeline CLI

Usage:
    python main.py [hydra overrides...]

Examples:
    python main.py source.domain=acme.freshservice.com source.lookback_minutes=60 sink.output_path=out/tickets.csv
    python main.py source.lookback_minutes=0 sink.tenant_id=... sink.client_id=... sink.client_secret=... \
        sink.dce_endpoint=https://... sink.dcr_immutable_id=dcr-... sink.stream_name=Custom-Tickets_CL

Settings not given on the command line are read from the environment (.env).
"""

import sys

from dotenv import load_dotenv

from etl.pipeline import run_pipeline
from utils.auth_utils import TokenAcquisitionError
from utils.config_utils import ConfigError, build_pipeline_config, load_config


def main(argv=None):
    load_dotenv()
    overrides = sys.argv[1:] if argv is None else argv

    try:
        config = build_pipeline_config(load_config(overrides))
    except ConfigError as e:
        print(f"!!! Error: {e}")
        return 1

    try:
        run_pipeline(config)
    except TokenAcquisitionError as e:
        print(f"❌ Authentication failed, nothing was sent: {e}")
        return 1
    except Exception as e:
        print(f"❌ Pipeline failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
