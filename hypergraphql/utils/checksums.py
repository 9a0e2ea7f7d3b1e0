"""
Checksum utilities for stored record integrity.

The file-backed store wraps every record in an envelope carrying a SHA256
checksum of the record payload. These helpers compute and verify that
checksum over a canonical JSON encoding (sorted keys, compact separators)
so the same record always hashes the same way.
"""

import hashlib
import json
from typing import Any, Dict, Union


def compute_checksum(data: Union[bytes, Dict[str, Any]], truncate: int = 16) -> str:
    """
    Compute SHA256 checksum of a record payload.

    Args:
        data: Raw bytes, or a dictionary that is JSON-serialized with
              sorted keys before hashing.
        truncate: Number of hex characters to return (default: 16).
                  Use 0 or None for the full 64-character digest.

    Returns:
        Hex digest string, truncated to the requested length

    Raises:
        TypeError: If data is neither bytes nor a dict
    """
    if isinstance(data, dict):
        payload = json.dumps(data, sort_keys=True, separators=(',', ':')).encode('utf-8')
    elif isinstance(data, bytes):
        payload = data
    else:
        raise TypeError(f"data must be bytes or dict, got {type(data).__name__}")

    digest = hashlib.sha256(payload).hexdigest()
    if truncate and truncate > 0:
        return digest[:truncate]
    return digest


def verify_checksum(data: Union[bytes, Dict[str, Any]], expected: str, truncate: int = 16) -> bool:
    """
    Check that a payload hashes to the expected checksum.

    Args:
        data: Payload to verify (bytes or dict)
        expected: Checksum recorded alongside the payload
        truncate: Digest length used when the checksum was computed

    Returns:
        True if the checksum matches
    """
    return compute_checksum(data, truncate=truncate) == expected
