"""
Deterministic internal user ids.

The auth provider's user id is not a database-native key, so every user is
stored under an id derived from it. The browser client derives the same id
with identical logic; changing anything here orphans existing records.
"""
from typing import Iterator

# Fixed namespace mixed into every id (matches the frontend)
NAMESPACE_UUID = "1b671a64-40d5-491e-99b0-da01ff1f3341"


def _utf16_code_units(value: str) -> Iterator[int]:
    """Yield UTF-16 code units, the same values JavaScript's charCodeAt returns."""
    raw = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(raw), 2):
        yield raw[i] | (raw[i + 1] << 8)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def generate_consistent_uuid(external_id: str) -> str:
    """
    Derive a UUID-shaped internal id from an external user id.

    Rolling ``hash * 31 + code_unit`` over ``external_id + NAMESPACE_UUID``
    with 32-bit wrap-around, hex-encoded and spread over the UUID groups.
    Not collision resistant.
    """
    hash_value = 0
    for code_unit in _utf16_code_units(external_id + NAMESPACE_UUID):
        hash_value = _to_int32((hash_value << 5) - hash_value + code_unit)

    hex_value = format(abs(hash_value), "x").zfill(8)
    return (
        f"{hex_value[0:8]}-{hex_value[0:4]}-4{hex_value[1:4]}"
        f"-a{hex_value[0:3]}-{hex_value[0:12].ljust(12, '0')}"
    )
