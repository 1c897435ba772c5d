"""
Agents Transformation

Builds the agent ID to display-name lookup used to resolve ticket responders.
"""

from etl.transform import create_id_mapping, join_name


def agent_display_name(agent):
    """'First Last', degrading to whichever part is present."""
    return join_name(agent.get("first_name"), agent.get("last_name"))


def build_agent_lookup(agents_data):
    """
    Create the agent lookup table.

    Args:
        agents_data: List of raw agent records

    Returns:
        Dictionary mapping agent id to display name
    """
    return create_id_mapping(
        data=agents_data,
        key_extractor=lambda agent: agent.get("id"),
        value_extractor=agent_display_name,
        entity_name="agents",
    )
