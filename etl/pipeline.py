"""
Helpdesk Ticket Pipeline

Runs extract -> enrich -> deliver for one pipeline configuration:
1. Extract agents and groups, build the two lookup tables
2. Extract tickets for the lookback window
3. Enrich every ticket using the lookups
4. Deliver the enriched tickets to the file or remote ingestion sink

The stage order lives in run_stages; run_pipeline calls the stages directly
and the Prefect flow in etl/dag.py passes them wrapped as tasks.
"""

from typing import Callable, NamedTuple

from etl.agents.transform import build_agent_lookup
from etl.extract import AGENTS, GROUPS, extract_resource
from etl.groups.transform import build_group_lookup
from etl.tickets.extract import extract_tickets
from etl.tickets.load import deliver_tickets
from etl.tickets.transform import enrich_tickets


class PipelineStages(NamedTuple):
    lookups: Callable
    extract: Callable
    enrich: Callable
    deliver: Callable


def extract_lookups(source):
    """Fetch agents and groups and build both lookup tables before any enrichment."""
    agent_lookup = build_agent_lookup(extract_resource(source, AGENTS))
    group_lookup = build_group_lookup(extract_resource(source, GROUPS))
    return agent_lookup, group_lookup


LOCAL_STAGES = PipelineStages(
    lookups=extract_lookups,
    extract=extract_tickets,
    enrich=enrich_tickets,
    deliver=deliver_tickets,
)


def run_stages(config, stages, now=None):
    """
    Run the stages in order for one configuration.

    Args:
        config: PipelineConfig
        stages: PipelineStages to call
        now: Reference time for the lookback window (defaults to current UTC time)

    Returns:
        DeliveryReport, or None when no tickets were fetched (nothing is enriched or delivered)
    """
    print("=" * 60)
    print("Starting Helpdesk Ticket Pipeline")
    print("=" * 60)
    print(f"Configuration: source={config.source.domain}, "
          f"lookback_minutes={config.source.lookback_minutes}, sink={config.sink.mode}")

    print("\n[Step 1] Building agent and group lookups...")
    agent_lookup, group_lookup = stages.lookups(config.source)

    print("\n[Step 2] Extracting tickets...")
    tickets = stages.extract(config.source, now=now)

    if not tickets:
        print("\n✅ No tickets found for this window. Nothing to deliver.")
        return None

    print("\n[Step 3] Enriching tickets...")
    records = stages.enrich(tickets, agent_lookup, group_lookup)

    print("\n[Step 4] Delivering tickets...")
    report = stages.deliver(records, config.sink)

    print("\n" + "=" * 60)
    print("✅ Helpdesk Ticket Pipeline completed")
    print("=" * 60)
    return report


def run_pipeline(config, now=None):
    """Run the pipeline once without an orchestrator."""
    return run_stages(config, LOCAL_STAGES, now=now)
