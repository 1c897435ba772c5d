"""
Tickets Transformation

Flattens raw tickets into enriched records: responder, group and requester
ids become names, custom fields become Custom_<name> columns and tags become
one comma-joined column.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from etl.transform import join_name


UNASSIGNED = "Unassigned"
UNKNOWN_REQUESTER = "Unknown"
# id present on the ticket but absent from the lookup table
LOOKUP_MISS = ""

FLATTENED_FIELDS = ("custom_fields", "tags")


@dataclass
class TicketRef:
    """Typed view of the ticket fields the enrichment reads."""
    id: Any = None
    responder_id: Optional[int] = None
    group_id: Optional[int] = None
    updated_at: Optional[str] = None
    requester: Optional[dict] = None
    custom_fields: list = field(default_factory=list)
    tags: list = field(default_factory=list)

    @classmethod
    def from_record(cls, ticket):
        requester = ticket.get("requester")
        custom_fields = ticket.get("custom_fields")
        tags = ticket.get("tags")
        return cls(
            id=ticket.get("id"),
            responder_id=ticket.get("responder_id"),
            group_id=ticket.get("group_id"),
            updated_at=ticket.get("updated_at"),
            requester=requester if isinstance(requester, dict) else None,
            custom_fields=list(custom_fields.items()) if isinstance(custom_fields, dict) else [],
            tags=list(tags) if isinstance(tags, (list, tuple)) else [],
        )


def resolve_name(ref_id, lookup):
    """Unassigned for a missing/zero id, LOOKUP_MISS for an id the lookup does not know."""
    if not ref_id:
        return UNASSIGNED
    return lookup.get(ref_id, LOOKUP_MISS)


def enrich_ticket(ticket, agent_lookup, group_lookup):
    """
    Build one enriched record from a raw ticket.

    Field order: original fields (minus custom_fields and tags), AgentName,
    GroupName, RequesterName, RequesterEmail, TimeGenerated, Custom_* fields,
    then Tags when the ticket has any.
    """
    ref = TicketRef.from_record(ticket)

    record = {key: value for key, value in ticket.items() if key not in FLATTENED_FIELDS}

    record["AgentName"] = resolve_name(ref.responder_id, agent_lookup)
    record["GroupName"] = resolve_name(ref.group_id, group_lookup)

    if ref.requester:
        record["RequesterName"] = join_name(ref.requester.get("first_name"), ref.requester.get("last_name"))
        record["RequesterEmail"] = ref.requester.get("email") or ""
    else:
        record["RequesterName"] = UNKNOWN_REQUESTER
        record["RequesterEmail"] = ""

    record["TimeGenerated"] = ref.updated_at

    for name, value in ref.custom_fields:
        record[f"Custom_{name}"] = value

    if ref.tags:
        record["Tags"] = ", ".join(str(tag) for tag in ref.tags)

    return record


def enrich_tickets(tickets, agent_lookup, group_lookup):
    """Enrich every ticket; the output has one record per input ticket, same order."""
    print(f"\nStarting transformation of {len(tickets)} tickets...")
    enriched = [enrich_ticket(ticket, agent_lookup, group_lookup) for ticket in tickets]
    print(f"Transformation complete. {len(enriched)} tickets enriched.")
    return enriched
