"""Content fingerprint used for change detection."""

import struct


def content_hash(text: str) -> str:
    """Return a 32-bit polynomial rolling hash of text as a decimal string.

    Each UTF-16 code unit is folded in as ``h = h * 31 + unit`` and the result
    is wrapped to the signed 32-bit range, so the values match fingerprints
    written by the browser plugin this state format comes from.

    This is not a cryptographic hash. Two different texts can share a
    fingerprint; the only consequence is that a changed note is not flagged
    as changed. Only compare fingerprints for equality.
    """
    value = 0
    data = text.encode("utf-16-le", "surrogatepass")
    for (unit,) in struct.iter_unpack("<H", data):
        value = (value * 31 + unit) & 0xFFFFFFFF

    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)
