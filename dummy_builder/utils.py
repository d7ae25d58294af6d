"""Hex and integer helpers for beacon/builder API JSON."""

from typing import Optional


def to_hex(value, length: int = 0) -> str:
    """Convert a bytes or int value to hex string with 0x prefix."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    elif isinstance(value, int):
        if length > 0:
            return "0x" + format(value, f'0{length * 2}x')
        return hex(value)
    return "0x" + bytes(value).hex()


def parse_hex(value, length: Optional[int] = None) -> bytes:
    """Decode a 0x-prefixed hex string, optionally checking its byte length."""
    if not isinstance(value, str):
        raise TypeError(f"Expected hex string, got {type(value).__name__}")
    if not value.startswith("0x"):
        raise ValueError(f"Hex string missing 0x prefix: {value[:20]}")
    data = bytes.fromhex(value[2:])
    if length is not None and len(data) != length:
        raise ValueError(f"Expected {length} bytes, got {len(data)}")
    return data


def parse_uint(value, bits: int = 64) -> int:
    """Decode an unsigned integer given as a decimal string (or int)."""
    if isinstance(value, bool):
        raise TypeError("Expected integer, got bool")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Invalid unsigned integer: {value[:20]}")
        result = int(value)
    elif isinstance(value, int):
        result = value
    else:
        raise TypeError(f"Expected integer, got {type(value).__name__}")
    if result < 0 or result >= 2**bits:
        raise ValueError(f"Integer out of range for uint{bits}: {result}")
    return result
