"""Hex string decoding and encoding for command line values and output."""

from typing import Optional
from .errors import HexDecodeError

_DIGITS = frozenset("0123456789abcdefABCDEF")


def decode(value: str, length: Optional[int] = None) -> bytes:
    """
    Decode a hex string, with or without a `0x` prefix.

    Parameters:
    value (str): The hex string to decode.
    length (Optional[int]): The exact number of bytes expected, if any.

    Returns:
    bytes: The decoded bytes.

    Raises:
    HexDecodeError: If the string has an odd number of digits, a digit that
    is not hexadecimal, or decodes to an unexpected number of bytes.
    """
    digits = value[2:] if value.startswith("0x") else value
    if len(digits) % 2 != 0:
        raise HexDecodeError("odd number of hex digits")
    for digit in digits:
        if digit not in _DIGITS:
            raise HexDecodeError(f"invalid hex digit {digit!r}")

    data = bytes.fromhex(digits)
    if length is not None and len(data) != length:
        raise HexDecodeError(f"wrong byte length of {len(data)}")
    return data


def encode(data: bytes, prefix: bool = False) -> str:
    """Lowercase hex encoding of `data`, `0x`-prefixed when `prefix` is set."""
    return ("0x" if prefix else "") + data.hex()
