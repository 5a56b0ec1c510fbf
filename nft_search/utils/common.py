from typing import Union

from .exceptions import InvalidEncoding


def strip_0x(value: str) -> str:
    """Remove a leading 0x/0X prefix if present"""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string (with or without 0x prefix) to bytes"""
    digits = strip_0x(value.strip())
    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise InvalidEncoding(f"Invalid hex data: {e}")


def bytes_to_hex(data: Union[bytes, bytearray]) -> str:
    """Encode bytes as a 0x-prefixed hex string"""
    return "0x" + bytes(data).hex()
