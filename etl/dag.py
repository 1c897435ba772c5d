"""
Helpdesk Ticket Pipeline DAG

This module defines a Prefect flow that orchestrates the ticket pipeline
with one task per stage. Stage order comes from etl.pipeline.run_stages.

Pipeline Structure:
1. Extract agents and groups → Build both lookups
2. Extract tickets (lookback window)
3. Enrich tickets (waits for both lookups)
4. Deliver tickets (file export or Logs Ingestion API)

The flow ensures that:
- Both lookups are complete before enrichment starts
- A run with no tickets stops after extraction
- A token failure stops the run before any batch is sent
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from prefect import flow, task

# Add project root to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from etl.pipeline import PipelineStages, extract_lookups, run_stages
from etl.tickets.extract import extract_tickets
from etl.tickets.load import deliver_tickets
from etl.tickets.transform import enrich_tickets
from utils.config_utils import build_pipeline_config, load_config


@task(name="build_lookups", log_prints=True)
def lookups_task(source):
    """Extract agents and groups and build both lookups."""
    return extract_lookups(source)


@task(name="extract_tickets", log_prints=True)
def extract_tickets_task(source, now=None):
    """Extract tickets from the helpdesk."""
    return extract_tickets(source, now=now)


@task(name="enrich_tickets", log_prints=True)
def enrich_tickets_task(tickets, agent_lookup, group_lookup):
    """Enrich tickets with agent, group and requester names."""
    return enrich_tickets(tickets, agent_lookup, group_lookup)


@task(name="deliver_tickets", log_prints=True)
def deliver_tickets_task(records, sink):
    """Deliver enriched tickets to the configured sink."""
    return deliver_tickets(records, sink)


DAG_STAGES = PipelineStages(
    lookups=lookups_task,
    extract=extract_tickets_task,
    enrich=enrich_tickets_task,
    deliver=deliver_tickets_task,
)


@flow(name="helpdesk_ticket_pipeline", log_prints=True)
def helpdesk_ticket_pipeline(overrides: Optional[List[str]] = None, now: Optional[datetime] = None):
    """
    Main pipeline flow.

    Args:
        overrides: Hydra overrides, e.g. ["source.lookback_minutes=60", "sink.output_path=out/tickets.csv"]
        now: Reference time for the lookback window (defaults to current UTC time)
    """
    config = build_pipeline_config(load_config(overrides))
    return run_stages(config, DAG_STAGES, now=now)


if __name__ == "__main__":
    load_dotenv()
    # Remaining arguments are Hydra overrides, e.g. sink.output_path=out/tickets.json
    helpdesk_ticket_pipeline(overrides=sys.argv[1:])
