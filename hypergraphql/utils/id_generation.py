"""
Identifier generation for hypergraph records.

Record IDs use the format: {kind}_{EPOCH_MILLIS}_{XXXXXXXX}
- kind: "entity" or "relation"
- EPOCH_MILLIS: creation time in milliseconds since the Unix epoch
- XXXXXXXX: 8 random hex characters (4 bytes)

Synthetic records produced by folder-level compression use a deterministic
ID derived from their type instead: aggregated_{type}.

Examples:
    >>> generate_entity_id()
    'entity_1735000000000_a1b2c3d4'

    >>> generate_relation_id()
    'relation_1735000000000_e5f6a7b8'

    >>> aggregated_id('Developer')
    'aggregated_Developer'
"""

import secrets
import time

ENTITY_PREFIX = "entity"
RELATION_PREFIX = "relation"
AGGREGATED_PREFIX = "aggregated"


def generate_record_id(prefix: str) -> str:
    """
    Generate a unique record ID with the given kind prefix.

    Args:
        prefix: Kind prefix ("entity" or "relation")

    Returns:
        ID string (e.g., 'entity_1735000000000_a1b2c3d4')
    """
    millis = time.time_ns() // 1_000_000
    suffix = secrets.token_hex(4)  # 8 hex chars
    return f"{prefix}_{millis}_{suffix}"


def generate_entity_id() -> str:
    """Generate a unique entity ID."""
    return generate_record_id(ENTITY_PREFIX)


def generate_relation_id() -> str:
    """Generate a unique relation ID."""
    return generate_record_id(RELATION_PREFIX)


def aggregated_id(record_type: str) -> str:
    """
    Deterministic ID for the synthetic record aggregating one type.

    Args:
        record_type: Entity or relation type being aggregated

    Returns:
        ID string 'aggregated_<type>'
    """
    return f"{AGGREGATED_PREFIX}_{record_type}"
