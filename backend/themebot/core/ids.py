"""Identifiers for stored upload files."""
import secrets
import time


def generate_time_based_id() -> str:
    """
    Return a 32 hex character id: 12 digits of epoch milliseconds followed by
    20 random digits. Ids sort lexicographically in creation order.
    """
    millis = time.time_ns() // 1_000_000
    return f"{millis:012x}{secrets.token_hex(10)}"
