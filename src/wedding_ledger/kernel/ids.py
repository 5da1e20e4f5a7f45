"""
Row identifiers

Time-ordered, UUIDv7-shaped identifiers with a short kind prefix
("evt", "bud", "gst", ...) so ids in logs and CSV exports say what they are.
"""

import secrets
import time


def _uuid7_hex() -> str:
    # 48-bit millisecond timestamp, version nibble 7, variant bits 10
    timestamp_ms = int(time.time() * 1000) & 0xFFFFFFFFFFFF
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)

    value = (timestamp_ms << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
    return f"{value:032x}"


def generate_id(prefix: str = "") -> str:
    """
    Generate a sortable unique identifier

    Args:
        prefix: Optional kind prefix, joined with a hyphen

    Returns:
        e.g. "gst-01908e9a-3b87-7abc-8def-123456789abc"
    """
    h = _uuid7_hex()
    uuid_str = f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"
    return f"{prefix}-{uuid_str}" if prefix else uuid_str
