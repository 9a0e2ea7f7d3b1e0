"""
Utility modules for the HyperGraphQL core.

Provides shared utilities for:
- ID generation (generate_entity_id, generate_relation_id, aggregated_id)
- Checksum computation and verification (compute_checksum, verify_checksum)
"""

from .id_generation import (
    generate_record_id,
    generate_entity_id,
    generate_relation_id,
    aggregated_id,
)
from .checksums import (
    compute_checksum,
    verify_checksum,
)

__all__ = [
    'generate_record_id',
    'generate_entity_id',
    'generate_relation_id',
    'aggregated_id',
    'compute_checksum',
    'verify_checksum',
]
