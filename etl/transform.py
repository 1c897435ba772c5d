"""
General Helpdesk Data Transformation Functions

This module provides reusable transformation functions for all helpdesk resources.
Resource-specific transform.py files import and use these functions.
"""


def create_id_mapping(data, key_extractor, value_extractor, entity_name):
    """
    Creates a generic ID to value mapping from data records.

    Args:
        data: List of records to create mapping from
        key_extractor: Function to extract the key (ID) from a record
        value_extractor: Function to extract the value (name/title) from a record
        entity_name: Name of entity type for logging (e.g., "agents", "groups")

    Returns:
        Dictionary mapping key to value. A repeated key keeps the last value.
    """
    print(f"\n--- Creating {entity_name.capitalize()} ID Mapping ---")

    mapping = {}
    for record in data:
        key = key_extractor(record)
        value = value_extractor(record)
        if key:
            mapping[key] = value

    print(f"-> {entity_name.capitalize()} ID mapping built ({len(mapping)} {entity_name})")

    return mapping


def join_name(first_name, last_name):
    """Joins first and last name with a single space; missing parts are skipped by the trim."""
    return f"{first_name or ''} {last_name or ''}".strip()
