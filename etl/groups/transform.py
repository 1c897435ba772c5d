"""
Groups Transformation

Builds the group ID to name lookup used to resolve ticket groups.
"""

from etl.transform import create_id_mapping


def build_group_lookup(groups_data):
    """Create the group lookup table (id -> name, verbatim)."""
    return create_id_mapping(
        data=groups_data,
        key_extractor=lambda group: group.get("id"),
        value_extractor=lambda group: group.get("name"),
        entity_name="groups",
    )
